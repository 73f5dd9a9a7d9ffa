import argparse
import logging
import random

from engine.exercise import ExerciseSession
from engine.generator import TEMPLATES
from engine.steps import ORDER_RULE


def main() -> None:
    parser = argparse.ArgumentParser(description="Print combined-operations exercises with worked steps.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    parser.add_argument("--count", type=int, default=1, help="How many exercises to print")
    parser.add_argument("--verbose", action="store_true", help="Log generator rejections")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    session = ExerciseSession(rng=random.Random(args.seed))

    for n in range(1, max(1, args.count) + 1):
        ex = session.next_exercise()
        template = TEMPLATES.get(ex.template)
        shape = template.shape if template else ex.template
        print(f"#{n} [{ex.template}] {ex.display}")
        print(f"   Template: {shape}")
        for o in ex.options:
            print(f"   {o.label}. {o.value}")
        print(f"   Rule: {ORDER_RULE}")
        for i, s in enumerate(ex.steps, 1):
            print(f"   Step {i} - {s.title}: {s.focus} = {s.value}")
            print(f"      {s.before}  =>  {s.after}")
        print(f"   Answer: {ex.answer}")
        print()


if __name__ == "__main__":
    main()
