"""
Command line for the BDL site data.

    bdl article BDL2025-004 --collapse "Article 2" --expand-history -o article.html
    bdl journal --search 2025
    bdl calendar --output calendrier-bdl.ics
    bdl tally 42
    bdl survey 7
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from bdl.calendar.events import load_events
from bdl.calendar.ical import build_ics
from bdl.core.config import LOG_LEVEL
from bdl.core.exceptions import BDLError
from bdl.core.logging import setup_logging
from bdl.journal.article import ConsolidatedArticle
from bdl.journal.service import JournalService, search_by_nor
from bdl.scrutin.service import ScrutinService
from bdl.store.client import StoreClient
from bdl.survey.models import QuestionKind
from bdl.survey.service import SurveyService
from bdl.utils.dates import format_date_fr

logger = logging.getLogger("bdl")


def _write_output(text: str, output: Optional[str]):
    if output:
        Path(output).write_text(text, encoding="utf-8")
        logger.info(f"Written {output}")
    else:
        sys.stdout.write(text + "\n")


def cmd_article(store: StoreClient, args) -> int:
    entry = JournalService(store).get_by_nor(args.nor)
    view = ConsolidatedArticle(entry)
    for title in args.collapse or []:
        view.toggle_section(title)
    if args.expand_history:
        view.toggle_history()
    _write_output(view.to_html(), args.output)
    return 0


def cmd_journal(store: StoreClient, args) -> int:
    entries = search_by_nor(JournalService(store).list_entries(), args.search)
    if not entries:
        if args.search:
            print("Aucun article ne correspond à ce numéro NOR.")
        else:
            print("Aucune publication pour le moment.")
        return 0
    for entry in entries:
        print(f"{entry.nor_number}\t{format_date_fr(entry.publication_date)}\t{entry.title}")
    return 0


def cmd_calendar(store: StoreClient, args) -> int:
    events = load_events(store)
    logger.info(f"{len(events)} event(s) exported")
    _write_output(build_ics(events), args.output)
    return 0


def cmd_tally(store: StoreClient, args) -> int:
    tally = ScrutinService(store).tally(args.scrutin_id)
    print(f"Votants: {tally.votants}")
    print(f"Exprimés: {tally.exprimes}")
    print(f"Majorité absolue: {tally.majorite_absolue}")
    print(f"Pour: {tally.pour}  Contre: {tally.contre}  Abstention: {tally.abstention}")
    print(tally.status_label())
    return 0


def cmd_survey(store: StoreClient, args) -> int:
    service = SurveyService(store)
    survey = service.get_survey(args.survey_id)
    questions = service.load_questions(survey.id)
    results = service.results(survey, questions)
    print(survey.title)
    if results is None:
        print("Sondage ouvert" if survey.is_open else "Les résultats de ce formulaire ne sont pas publiés.")
        return 0
    for question in questions:
        print(f"\n{question.text}")
        result = results[question.id]
        if result.kind is QuestionKind.QCM:
            for option in result.options:
                print(f"  {option.name}: {option.value}")
        else:
            for answer in result.answers:
                print(f"  - {answer}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bdl", description="Bureau des Lycéens site data")
    parser.add_argument("--log-level", default=LOG_LEVEL, type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    subparsers = parser.add_subparsers(dest="command", required=True)

    article = subparsers.add_parser("article", help="Render a consolidated journal article")
    article.add_argument("nor", help="NOR number of the article")
    article.add_argument("--collapse", action="append", metavar="TITLE",
                         help="Collapse the section with this heading (repeatable)")
    article.add_argument("--expand-history", action="store_true",
                         help="Show the modifications history")
    article.add_argument("-o", "--output", help="Write HTML to this file instead of stdout")
    article.set_defaults(handler=cmd_article)

    journal = subparsers.add_parser("journal", help="List official journal entries")
    journal.add_argument("--search", default="", help="Filter by NOR")
    journal.set_defaults(handler=cmd_journal)

    calendar = subparsers.add_parser("calendar", help="Export the calendar as iCal")
    calendar.add_argument("-o", "--output", help="Write .ics to this file instead of stdout")
    calendar.set_defaults(handler=cmd_calendar)

    tally = subparsers.add_parser("tally", help="Print the result of a scrutin")
    tally.add_argument("scrutin_id", help="Scrutin id")
    tally.set_defaults(handler=cmd_tally)

    survey = subparsers.add_parser("survey", help="Print the results of a closed survey")
    survey.add_argument("survey_id", help="Survey id")
    survey.set_defaults(handler=cmd_survey)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("bdl", level=args.log_level)

    try:
        with StoreClient() as store:
            return args.handler(store, args)
    except BDLError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
