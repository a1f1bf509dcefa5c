"""Console entry point: a self-graded practice session."""
import asyncio
import logging

from vocabcoach.app import VocabCoach
from vocabcoach.config import ensure_directories, settings
from vocabcoach.logging_config import setup_logging
from vocabcoach.models.grading import GradingResult
from vocabcoach.monitoring import start_monitoring

logger = logging.getLogger(__name__)


async def ask(prompt: str) -> str:
    return (await asyncio.to_thread(input, prompt)).strip().lower()


async def practice(coach: VocabCoach) -> None:
    """Present words until the user quits."""
    while True:
        entry = coach.next_word()
        if entry.is_empty:
            print("The dictionary is empty.")
            return

        print()
        print(entry.word)
        print(entry.definition_text())
        sentence = await ask("Your sentence (blank to quit): ")
        if not sentence:
            return

        grammar = await ask("Grammar correct? [y/n] ") == "y"
        usage = await ask("Usage [correct/partial/incorrect]: ")
        result = GradingResult(grammar_correct=grammar, usage_level=usage)
        stars = result.star_rating()
        if coach.submit_grading(entry.word, result):
            print(f"{'*' * stars}{'.' * (3 - stars)}")
        else:
            print("Score could not be saved.")


async def main() -> None:
    """Run a practice session."""
    coach = VocabCoach()
    try:
        await coach.start()
        await practice(coach)
    except EOFError:
        logger.info("Session interrupted")
    finally:
        await coach.stop()


def run() -> None:
    """Console script entry point."""
    ensure_directories()
    setup_logging("Starting VocabCoach ...")
    if settings.monitoring.port is not None:
        start_monitoring(settings.monitoring.port)
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")


if __name__ == "__main__":
    run()
