"""CLI commands for PhytoScan."""

import argparse
import asyncio
import sys

from phytoscan.api.dependencies import build_session
from phytoscan.models.disease import DiseaseStage
from phytoscan.services.disease_database import DISEASE_DATABASE
from phytoscan.services.session_service import AnalysisFailedError, DiagnosisSession
from phytoscan.services.severity import confidence_label

CLEAR_CONFIRMATION = (
    "Are you sure? All analysis records and feedback stats will be wiped. [y/N] "
)


def diagnose(
    session: DiagnosisSession,
    image_path: str,
    correct: bool = False,
    suggested_stage: str | None = None,
) -> None:
    """Diagnose one image, optionally recording feedback right away."""
    try:
        result = asyncio.run(session.run_diagnosis(image_path))
    except AnalysisFailedError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Diagnosis: {result.disease.name} ({result.stage.value})")
    print(
        f"Confidence: {round(result.confidence * 100)}% "
        f"({confidence_label(result.confidence)})"
    )
    print(f"Severity: {result.severity_score}/100 - {result.disease.severity_label}")
    if result.quality_issues:
        print(f"Photo quality issues: {', '.join(result.quality_issues.flagged())}")
    if result.reasoning_for_farmer:
        print(f"\n{result.reasoning_for_farmer}")
    for label, steps in result.disease.treatment_sections():
        print(f"\n{label}:")
        for i, step in enumerate(steps, start=1):
            print(f"  {i}. {step}")

    if correct:
        session.record_feedback(True)
        print("\nFeedback recorded: confirmed")
    elif suggested_stage:
        session.record_feedback(False, DiseaseStage(suggested_stage.upper()))
        print(f"\nFeedback recorded: corrected to {suggested_stage.upper()}")


def show_history(session: DiagnosisSession) -> None:
    items = session.get_history()
    if not items:
        print("No analysis history yet.")
        return

    for item in items:
        line = (
            f"{item.timestamp}  {item.stage.value}  {item.disease_name:<22} "
            f"{round(item.confidence * 100):>3}%  severity {item.severity_score:>3}"
        )
        if item.user_feedback:
            if item.user_feedback.is_correct:
                line += "  CONFIRMED"
            else:
                suggested = item.user_feedback.user_suggested_stage
                line += f"  USER FLAG: {suggested.value if suggested else '-'}"
        print(line)


def show_stats(session: DiagnosisSession) -> None:
    stats = session.get_stats()
    print(f"Total scans: {stats.total}")
    print(f"Confirmed:   {stats.confirmed}")
    print(f"Corrected:   {stats.corrected}")
    print(f"Agreement:   {stats.accuracy}%")


def show_diseases() -> None:
    for stage, disease in DISEASE_DATABASE.items():
        print(f"{stage.value}  {disease.name} - {disease.severity_label}")


def clear_history(session: DiagnosisSession, assume_yes: bool = False) -> None:
    confirmed = assume_yes or input(CLEAR_CONFIRMATION).strip().lower() in ("y", "yes")
    if session.clear_history(confirmed=confirmed):
        print("History cleared.")
    else:
        print("Aborted.")


def main():
    parser = argparse.ArgumentParser(description="PhytoScan CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    diagnose_parser = subparsers.add_parser("diagnose", help="Diagnose a leaf photo")
    diagnose_parser.add_argument("image", help="Path to the leaf image")
    feedback_group = diagnose_parser.add_mutually_exclusive_group()
    feedback_group.add_argument(
        "--correct", action="store_true", help="Confirm the diagnosis"
    )
    feedback_group.add_argument(
        "--incorrect",
        metavar="STAGE",
        choices=[stage.value for stage in DiseaseStage],
        type=str.upper,
        help="Flag the diagnosis as wrong and give the correct stage",
    )

    subparsers.add_parser("history", help="List past diagnoses")
    subparsers.add_parser("stats", help="Show AI agreement statistics")
    subparsers.add_parser("diseases", help="List the disease reference database")

    clear_parser = subparsers.add_parser("clear", help="Delete all history")
    clear_parser.add_argument(
        "--yes", action="store_true", help="Skip the confirmation prompt"
    )

    args = parser.parse_args()

    if args.command == "diseases":
        show_diseases()
        return
    if args.command not in ("diagnose", "history", "stats", "clear"):
        parser.print_help()
        sys.exit(1)

    session = build_session()
    if args.command == "diagnose":
        diagnose(session, args.image, args.correct, args.incorrect)
    elif args.command == "history":
        show_history(session)
    elif args.command == "stats":
        show_stats(session)
    elif args.command == "clear":
        clear_history(session, args.yes)


if __name__ == "__main__":
    main()
