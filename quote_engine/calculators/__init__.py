"""
Product calculators — deterministic price, lead time and weight per product type.

Pure Python math over the loaded rate tables. No I/O, no clock: every
time-dependent rule takes the order instant as an explicit argument.
"""
