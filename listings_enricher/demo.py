"""Demo inputs for trying the pipeline without your own files.

The listings exercise every rule: a duplicate APN at two prices, a
mixed-case status, an unparsable price and a withdrawn listing.
"""

DEMO_LISTINGS_TSV = (
    "apn\taddress\tcity\tstate\tzip\tprice\tbeds\tbaths\tsqft\tstatus\n"
    "12-34-567890\t12 Oak St\tOrlando\tFL\t32801\t450000\t3\t2\t1600\tfor_sale\n"
    "12-34-567890\t12 Oak St\tOrlando\tFL\t32801\t440000\t3\t2\t1600\tfor_sale\n"
    "55-66-777888\t99 Pine Ave\tMiami\tFL\t33101\t800000\t4\t3\t2200\tPending\n"
    "99-00-111222\t7 Lake View\tMiami\tFL\t33101\tNaN\t2\t1\t900\tfor_sale\n"
    "22-33-444555\t42 Elm Rd\tTampa\tFL\t33602\t520000\t3\t2.5\t1800\tsold\n"
    "77-88-999000\t1 Beach Dr\tMiami\tFL\t33101\t1200000\t5\t4\t3500\twithdrawn"
)

# A row that lost its APN cell: every value shifts one column left and the
# status column goes missing, so structural validation rejects the run.
DEMO_MALFORMED_LISTING_ROW = "123 Unknown Rd\tOrlando\tFL\t32801\t300000\t2\t1\t900\tfor_sale"

DEMO_CLIMATE_CSV = (
    "apn,flood_zone,avg_rain_inches\n"
    "1234567890,AE,52.1\n"
    "5566777888,X,61.3\n"
    "2233444555,VE,49.0"
)


def demo_listings(with_malformed_row: bool = False) -> str:
    if with_malformed_row:
        return f"{DEMO_LISTINGS_TSV}\n{DEMO_MALFORMED_LISTING_ROW}"
    return DEMO_LISTINGS_TSV
