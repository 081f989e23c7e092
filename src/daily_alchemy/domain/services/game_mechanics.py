"""Pure game rules and constants - no external services."""

import random
from datetime import date, datetime
from typing import Optional, Sequence, Tuple

import pytz

from ..models.element import STARTER_NAMES


class GameMechanics:
    """
    Pure game mechanics and rules for Daily Alchemy.

    Holds game constants, puzzle-date arithmetic and the small text helpers
    used by completion screens. No I/O.
    """

    # Daily puzzles roll over at midnight Eastern
    PUZZLE_TIMEZONE = pytz.timezone("America/New_York")

    TIME_LIMIT_SECONDS = 600
    MAX_FAVORITES = 12
    RECENT_ELEMENTS_CAPACITY = 3
    CREATIVE_SLOTS: Tuple[int, ...] = (1, 2, 3)
    AUTOSAVE_DISCOVERY_INTERVAL = 5

    # Leaderboard game type identifier
    GAME_TYPE = "soup"

    SHARE_URL = "tandemdaily.com/daily-alchemy"

    PUZZLE_UNAVAILABLE_MESSAGE = "It seems our Puzzlemaster is a little behind. Come back shortly!"
    COMBINATION_ERROR_MESSAGE = "Hmm, couldn't find a combination. Try a different pair!"

    CONGRATS_MESSAGES = (
        "Elemental Mastery!",
        "Alchemist Supreme!",
        "Perfect Concoction!",
        "Masterful Mixing!",
        "Element Genius!",
        "Pure Gold!",
        "Crafting Complete!",
        "Discovery Champion!",
        "Element Wizard!",
        "Cauldron King!",
    )

    COOP_CONGRATS_MESSAGES = (
        "Dynamic Duo!",
        "Two Minds, One Brew!",
        "Team Alchemy!",
        "Legendary Partners!",
        "Perfect Synergy!",
        "Double Trouble!",
        "Cauldron Companions!",
        "Co-op Champions!",
        "Better Together!",
        "Alchemi-TEAM!",
    )

    FIRST_DISCOVERY_MESSAGES = (
        "First Discovery!",
        "You Found Something New!",
        "Pioneering Discovery!",
        "Never Seen Before!",
        "World First!",
    )

    GAME_OVER_MESSAGES = (
        "Time's Up!",
        "The Cauldron Cooled!",
        "Out of Time!",
        "The Magic Faded!",
    )

    PAR_MESSAGES = {
        "under": ("Under par!", "Efficient mixing!", "Speed alchemist!", "Quick thinking!"),
        "at": ("Right on par!", "Precisely done!", "Perfectly calculated!"),
        "over": ("Got there!", "Mission complete!", "Target acquired!"),
    }

    # {element} is replaced with the hinted element name
    HINT_PHRASES = (
        "What elements create {element}?",
        "How would you create {element}?",
        "Which two elements combine to create {element}?",
        "Try to make {element}!",
        "Hint: Create {element}",
        "Can you figure out how to make {element}?",
        "Think about what makes {element}...",
        "What could combine into {element}?",
        "Your next goal: {element}",
        "Focus on creating {element}",
        "The path leads through {element}",
        "You need {element} next",
        "Consider: what forms {element}?",
        "Combine something to get {element}",
        "Work toward {element}",
        "What two things make {element}?",
        "Aim for {element}",
        "Next step: discover {element}",
        "Look for a way to make {element}",
        "The answer involves {element}",
    )

    @classmethod
    def is_starter_name(cls, name: str) -> bool:
        return name.lower().strip() in STARTER_NAMES

    @classmethod
    def count_starters(cls, *names: str) -> int:
        return sum(1 for name in names if cls.is_starter_name(name))

    # Dates

    @classmethod
    def get_current_puzzle_date(cls, now: Optional[datetime] = None) -> str:
        """Today's puzzle date (YYYY-MM-DD) in America/New_York."""
        if now is None:
            current = datetime.now(cls.PUZZLE_TIMEZONE)
        elif now.tzinfo is None:
            current = pytz.utc.localize(now).astimezone(cls.PUZZLE_TIMEZONE)
        else:
            current = now.astimezone(cls.PUZZLE_TIMEZONE)
        return current.strftime("%Y-%m-%d")

    @classmethod
    def is_archive_date(cls, puzzle_date: Optional[str], now: Optional[datetime] = None) -> bool:
        """Any date other than today-in-ET is an archive puzzle."""
        return bool(puzzle_date) and puzzle_date != cls.get_current_puzzle_date(now)

    @staticmethod
    def format_puzzle_date(puzzle_date: str) -> str:
        """YYYY-MM-DD -> MM/DD/YY."""
        parsed = date.fromisoformat(puzzle_date)
        return parsed.strftime("%m/%d/%y")

    # Scoring and text

    @staticmethod
    def format_time(seconds: int) -> str:
        """Seconds -> M:SS."""
        minutes, secs = divmod(max(0, int(seconds)), 60)
        return f"{minutes}:{secs:02d}"

    @staticmethod
    def get_par_comparison(moves: int, par: int) -> str:
        """Signed moves-minus-par: "0", "+N" or "-N"."""
        diff = moves - par
        if diff == 0:
            return "0"
        return f"+{diff}" if diff > 0 else str(diff)

    @classmethod
    def get_par_message(cls, moves: int, par: int) -> str:
        diff = moves - par
        bucket = "at" if diff == 0 else ("under" if diff < 0 else "over")
        return cls.random_message(cls.PAR_MESSAGES[bucket])

    @staticmethod
    def random_message(messages: Sequence[str]) -> str:
        return random.choice(messages)

    @classmethod
    def hint_message(cls, element_name: str) -> str:
        return cls.random_message(cls.HINT_PHRASES).format(element=element_name)

    @classmethod
    def generate_share_text(
        cls,
        puzzle_date: str,
        time_seconds: int,
        moves: int,
        par: int,
        first_discoveries: int = 0,
        hints_used: int = 0,
    ) -> str:
        """Build the share block for a completed puzzle."""
        parsed = date.fromisoformat(puzzle_date)
        formatted_date = f"{parsed.month}/{parsed.day}/{parsed.strftime('%y')}"

        lines = [
            f"Daily Alchemy {formatted_date}",
            f"⏱️ {cls.format_time(time_seconds)}",
            f"🧮 {moves} moves (Par: {par})",
        ]
        if hints_used > 0:
            lines.append(f"💡 Hints: {hints_used}")
        if first_discoveries > 0:
            lines.append(f"🏆 First discoveries: {first_discoveries}")
        lines.append("")
        lines.append(cls.SHARE_URL)
        return "\n".join(lines)
