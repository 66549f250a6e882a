"""PP-PDV XML document rendering for electronic filing."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from xml.sax.saxutils import escape

from vat_declaration.domain.declaration import Declaration, DeclarationHeader

PPPDV_NAMESPACE = "urn:poreskauprava.gov.rs:ObrazacPPPDV"

_CENTS = Decimal("0.01")
_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}
# Complement of the XML 1.0 Char production
_ILLEGAL_XML_CHARS = re.compile(
    r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]"
)


def format_amount(value: Decimal) -> str:
    """Two decimal places, half away from zero. Negative zero prints 0.00."""
    rounded = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:f}"


def escape_text(value: str) -> str:
    """Escape & < > " and ' for element content.

    Characters XML 1.0 cannot represent (most C0 controls, surrogates,
    U+FFFE and U+FFFF) are dropped.
    """
    return escape(_ILLEGAL_XML_CHARS.sub("", value), _QUOTE_ENTITIES)


def render_declaration_xml(
    declaration: Declaration, header: DeclarationHeader
) -> str:
    """Render the declaration as an ObrazacPPPDV XML document.

    Body elements follow the form's canonical field order.
    """
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<ObrazacPPPDV xmlns="{PPPDV_NAMESPACE}">',
        "  <Zaglavlje>",
        f"    <PIB>{escape_text(header.taxpayer_id)}</PIB>",
        f"    <NazivObveznika>{escape_text(header.entity_name)}</NazivObveznika>",
        f"    <PoreskiPeriodOd>{escape_text(header.period_start.isoformat())}</PoreskiPeriodOd>",
        f"    <PoreskiPeriodDo>{escape_text(header.period_end.isoformat())}</PoreskiPeriodDo>",
        f"    <GodinaPerioda>{header.period_year}</GodinaPerioda>",
        f"    <MesecPerioda>{header.period_month}</MesecPerioda>",
        "  </Zaglavlje>",
        "  <Podaci>",
    ]
    for number, amount in declaration.items():
        lines.append(f"    <Polje{number}>{format_amount(amount)}</Polje{number}>")
    lines += ["  </Podaci>", "</ObrazacPPPDV>"]
    return "\n".join(lines)


def declaration_filename(header: DeclarationHeader) -> str:
    return f"PP-PDV_{header.period_year}_{header.period_month:02d}.xml"


def declaration_summary(declaration: Declaration) -> dict[str, str]:
    """Declaration fields as display strings, keyed by field number."""
    return {number: format_amount(amount) for number, amount in declaration.items()}
