"""
Static reference tables bundled with the package.

`country_codes.csv` lists every ISO 3166-1 country, one row per alpha-2
code (249 rows), with the English short name, a matching regex, the
ISO English name, the currency and the alpha-2/alpha-3 codes. `UK` is
not an ISO code, so the transit costs table must be normalized before
joining on `iso2c`.
"""
