"""POPDV field codes referenced by the PP-PDV section formulas.

Prefixes select a whole code family (e.g. every "8a.*" line); exact codes
select a single POPDV line.
"""

# Domestic sales, used for synthetic credit-note lines
SALES_STANDARD_RATE = "3.2"
SALES_REDUCED_RATE = "3.3"
SALES_ZERO_RATE = "3.6"

# Section 1 / 2: exempt supplies with and without deduction right
EXEMPT_WITH_DEDUCTION_PREFIX = "1"
EXEMPT_WITH_DEDUCTION_TOTAL = "1.5"
EXEMPT_WITHOUT_DEDUCTION_PREFIX = "2"
EXEMPT_WITHOUT_DEDUCTION_TOTAL = "2.5"

# Section 3 / 3a: regular taxable sales and reverse-charge liabilities
REGULAR_SALES_PREFIX = "3"

# Section 4: special procedures
SPECIAL_PROCEDURE_BASE = ("4.1.3", "4.2.3")
SPECIAL_PROCEDURE_VAT = ("4.1.4", "4.2.4")

# Section 5: increases/decreases of the taxable base
BASE_ADJUSTMENTS = ("5.4", "5.5")

# Section 6: imports
IMPORT_BASE_ADDITIONS = ("6.2.1", "6.2.2")
IMPORT_BASE_REDUCTION = "6.2.3"
IMPORT_VAT = "6.4"

# Section 7: flat-rate farmer compensation
FARMER_BASE = "7.1"
FARMER_COMPENSATION = "7.3"

# Section 8: input VAT families
DOMESTIC_PURCHASE_PREFIX = "8a"
TAX_DEBTOR_PURCHASE_PREFIX = "8b"
FOREIGN_SERVICE_PREFIX = "8g"
CORRECTION_INCREASE = "8e.3"
CORRECTION_DECREASE = "8e.4"

# Section 9: non-deductible input VAT disclosure
NON_DEDUCTIBLE_PREFIX = "9"
