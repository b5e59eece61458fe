#!/usr/bin/env python3
"""Simulate filling an order form through the OrderEngine.

Picks products (randomly by default), then tries to claim as many gifts as
each gift section allows, printing the running total and every gift
section's allowance after each step.  Finally removes products again to
show over-selected gifts being trimmed.

Usage::

    # Default run against forms/ (random picks)
    python scripts/simulate_order.py

    # Deterministic run: select every product once
    python scripts/simulate_order.py --no-random

    # Replay a saved answer set
    python scripts/simulate_order.py --answers answers.json

    # List loaded forms
    python scripts/simulate_order.py --list-forms
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

_REPO_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from giftform_rules.engine import OrderEngine  # noqa: E402
from giftform_rules.forms import FormIndex, FormStore  # noqa: E402
from giftform_rules.models.order import OrderState  # noqa: E402
from giftform_rules.review import selected_gifts, selected_products  # noqa: E402

console = Console()


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def print_state(label: str, state: OrderState) -> None:
    table = Table(title=f"{label} — total ${state.total:,}", show_lines=False)
    table.add_column("Gift section", min_width=24)
    table.add_column("Status", width=18)
    table.add_column("Max", width=4)
    table.add_column("Selected")
    table.add_column("Message")

    for section in state.gift_sections:
        table.add_row(
            section.title,
            section.status.value,
            str(section.max_selections),
            ", ".join(section.selections) or "-",
            section.message,
        )
    console.print(table)


def print_review(engine: OrderEngine, index: FormIndex) -> None:
    console.rule("[bold]Order review")
    for product in selected_products(engine.answers, index):
        console.print(f"  {product.name}  [green]${product.price:,}[/]")
    for items in selected_gifts(engine.answers, index).values():
        for gift in items:
            console.print(f"  {gift.name}  [cyan]免費[/]")
    console.print(f"  [bold]Total: ${engine.total:,}[/]")


# ---------------------------------------------------------------------------
# Simulation
# ---------------------------------------------------------------------------

def _product_picks(index: FormIndex, use_random: bool) -> list[tuple[str, str]]:
    """(question_id, option) pairs for every priced choice question."""
    picks = []
    for item in index.form.items:
        for question in item.questions:
            qid = question.question_id
            if qid in index.gift_sections or qid in index.text_question_ids:
                continue
            options = [o.value for o in question.options]
            if not options:
                continue
            if use_random and random.random() < 0.4:
                continue
            picks.append((qid, random.choice(options) if use_random else options[0]))
    return picks


def simulate(index: FormIndex, use_random: bool, answers_path: Path | None) -> None:
    engine = OrderEngine(index)
    engine.subscribe(lambda s: logging.getLogger("simulate").debug("total=%d", s.total))

    if answers_path is not None:
        answers = json.loads(answers_path.read_text(encoding="utf-8"))
        print_state("Replayed answers", engine.replace_answers(answers))
        print_review(engine, index)
        return

    picks = _product_picks(index, use_random)
    for qid, option in picks:
        print_state(f"Selected {option}", engine.set_answer(f"question_{qid}", [option]))

    for qid, section in index.gift_sections.items():
        for option in section.options:
            if not engine.is_option_selectable(qid, option):
                console.print(f"  [yellow]Refused[/] {option}: limit reached")
                continue
            engine.toggle_option(qid, option)
        print_state(f"Claimed gifts in {section.display_title}", engine.state)

    print_review(engine, index)

    # Drop products again; gift selections shrink with the total
    for qid, _ in reversed(picks):
        print_state(f"Removed question {qid}", engine.clear_answer(f"question_{qid}"))


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Simulate an order through the OrderEngine.",
    )
    parser.add_argument("-f", "--form", help="Form id (default: first loaded form)")
    parser.add_argument("--forms-dir", type=Path, default=None, help="Forms directory")
    parser.add_argument("--answers", type=Path, default=None, help="Answer set JSON to replay")
    parser.add_argument("--list-forms", action="store_true", help="List loaded forms and exit")
    parser.add_argument(
        "--random",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Randomise product picks (default: on).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    if args.seed is not None:
        random.seed(args.seed)

    store = FormStore(forms_dir=args.forms_dir)
    store.load()

    if args.list_forms:
        for form in store.list_forms():
            console.print(f"  {form.form_id:<30s} {form.info.title}")
        sys.exit(0)

    forms = store.list_forms()
    if not forms:
        console.print("[red]No forms loaded[/]")
        sys.exit(1)
    index = store.get_index(args.form or forms[0].form_id)
    simulate(index, args.random, args.answers)


if __name__ == "__main__":
    main()
