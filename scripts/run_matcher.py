# scripts/run_matcher.py
import argparse
from opportunity_matcher.main import run


def main():
    parser = argparse.ArgumentParser(description="Rank snapshot files and write JSON/CSV results.")
    parser.add_argument("--config", default="config/config.yaml")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--student", help="rank open opportunities for this student id")
    target.add_argument("--opportunity", help="rank active students for this opportunity id")
    args = parser.parse_args()
    run(args.config, student_id=args.student, opportunity_id=args.opportunity)


if __name__ == "__main__":
    main()
