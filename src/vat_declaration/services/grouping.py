"""Line grouper: raw tax lines to one aggregated line per POPDV field code."""

from __future__ import annotations

from collections.abc import Iterable

from vat_declaration.domain.aggregation import AggregatedLine
from vat_declaration.domain.tax_lines import RawTaxLine
from vat_declaration.domain.value_objects import Direction


def group_lines(
    lines: Iterable[RawTaxLine], direction: Direction
) -> list[AggregatedLine]:
    """Group raw lines of one direction by field code.

    Lines without a field code are skipped. The result is sorted by field
    code so that downstream output does not depend on fetch order.
    """
    groups: dict[str, AggregatedLine] = {}

    for line in lines:
        if not line.field_code:
            continue
        group = groups.get(line.field_code)
        if group is None:
            group = AggregatedLine(field_code=line.field_code, direction=direction)
            groups[line.field_code] = group
        group.add(line)

    return sorted(groups.values(), key=lambda g: g.field_code)
