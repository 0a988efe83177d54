"""Generate random transaction files for exercising the payments engine.

Rows are deliberately messy: mixed line endings, amounts on rows that should
not carry one, and amounts with more than four decimal places.
"""

import argparse
import random
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Union

import structlog

from models import MAX_ACCOUNT_ID

logger = structlog.get_logger()

HEADER = "type, client, tx, amount"

# deposit appears twice so roughly a third of rows add funds
KIND_WEIGHTS = ("deposit", "withdrawal", "dispute", "resolve", "chargeback", "deposit")


def generate_rows(count: int, max_client_id: int, rng: random.Random) -> Iterator[str]:
    """Yield ``count`` CSV lines with shuffled, unique transaction ids."""
    transaction_ids = list(range(count))
    rng.shuffle(transaction_ids)

    for transaction_id in transaction_ids:
        client_id = rng.randrange(max_client_id)
        kind = rng.choice(KIND_WEIGHTS)
        if rng.random() < 0.5:
            amount = f"{rng.random():.{rng.randint(1, 8)}f}"
            yield f"{kind}, {client_id}, {transaction_id}, {amount}"
        else:
            yield f"{kind}, {client_id}, {transaction_id}"


def write_test_file(path: Union[str, Path], count: int = 50000, max_client_id: int = 10,
                    seed: Optional[int] = None) -> int:
    """Write a header plus ``count`` random rows. Returns the number of rows written."""
    rng = random.Random(seed)
    written = 0
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(HEADER + "\r\n")
        for line in generate_rows(count, max_client_id, rng):
            f.write(line + rng.choice(("\n", "\r\n")))
            written += 1

    logger.info("Test file generated", path=str(path), rows=written, seed=seed)
    return written


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="payments-testgen",
        description="Generate a random transactions CSV file",
    )
    parser.add_argument("-o", "--output", default="test.csv", help="Output path (default: test.csv)")
    parser.add_argument("--count", type=int, default=50000, help="Number of transactions")
    parser.add_argument("--clients", type=int, default=10, help="Number of distinct client ids")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible files")
    args = parser.parse_args(argv)

    if args.count < 0:
        parser.error("--count must not be negative")
    if not 1 <= args.clients <= MAX_ACCOUNT_ID + 1:
        parser.error(f"--clients must be between 1 and {MAX_ACCOUNT_ID + 1}")

    write_test_file(args.output, count=args.count, max_client_id=args.clients, seed=args.seed)
    print(f"Generated {args.count} transactions in {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
