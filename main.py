"""
Entry point for the UK take-home pay and pension calculator.

Usage:
    python main.py                              # interactive prompts
    python main.py --income 60000 --student-loan plan2
    python main.py --income 60000 --chart report.png
"""

import argparse
import logging

import config as cfg


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="UK take-home pay, National Insurance, student loan and pension calculator",
    )
    parser.add_argument("--income", type=float,
                        help="Annual gross income; omit to be prompted for every input")
    parser.add_argument("--tax-year", default=cfg.DEFAULT_TAX_YEAR,
                        help=f"Tax year, one of {', '.join(cfg.available_tax_years())}")
    parser.add_argument("--scotland", action="store_true",
                        help="Use Scottish income tax bands")
    parser.add_argument("--student-loan", default="none", choices=cfg.STUDENT_LOAN_PLANS)
    parser.add_argument("--no-ni", action="store_true",
                        help="No National Insurance due (e.g. over state pension age)")
    parser.add_argument("--salary-sacrifice", type=float, default=0.0,
                        help="Annual salary sacrificed into a pension (GBP)")
    parser.add_argument("--auto-enrolment", type=float, default=0.0,
                        help="Auto-enrolment contribution as a percentage of pay")
    parser.add_argument("--auto-enrolment-as-salary-sacrifice", action="store_true",
                        help="Auto-enrolment contribution is also taken by salary sacrifice "
                             "(reduces pay before NI and student loan)")
    parser.add_argument("--personal", type=float, default=0.0,
                        help="Net personal pension contribution (GBP)")
    parser.add_argument("--no-relief-at-source", action="store_true",
                        help="Personal contribution is not grossed up by basic-rate relief")
    parser.add_argument("--voluntary", type=float,
                        help="Voluntary contribution to price the tax saving of")
    parser.add_argument("--chart", metavar="PATH",
                        help="Save income sweep and savings charts (.png or .pdf)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from cli import print_report, run_cli
    from tax import PensionContributions, TaxInputs

    try:
        if args.income is None:
            gross, inputs = run_cli()
        else:
            gross = args.income
            inputs = TaxInputs(
                tax_year=args.tax_year,
                resident_in_scotland=args.scotland,
                student_loan=args.student_loan,
                no_ni=args.no_ni,
                pension_contributions=PensionContributions(
                    salary_sacrifice=args.salary_sacrifice,
                    auto_enrolment=args.auto_enrolment,
                    personal=args.personal,
                ),
                auto_enrolment_as_salary_sacrifice=args.auto_enrolment_as_salary_sacrifice,
                tax_relief_at_source=not args.no_relief_at_source,
            )
            print_report(gross, inputs, args.voluntary)
    except (cfg.UnknownTaxYearError, cfg.UnknownStudentLoanPlanError) as exc:
        parser.error(str(exc))

    if args.chart:
        import report
        from sweep import income_sweep, savings_table

        path = report.save_report(income_sweep(inputs), inputs, savings_table(gross, inputs), args.chart)
        print(f"  Chart saved to {path}\n")


if __name__ == "__main__":
    main()
