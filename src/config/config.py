import logging
import os
from typing import Optional

import yaml

from games.countdown import Puzzle

logger = logging.getLogger(__name__)

DEFAULT_PUZZLES_PATH = os.path.join(os.path.dirname(__file__), 'puzzles.yaml')


class Config:
    def __init__(self, puzzles_path: Optional[str] = None):
        self.discord_token = os.getenv('DISCORD_TOKEN')
        self.owner_id = os.getenv('OWNER_ID')
        self.redis_host = os.getenv('REDIS_HOST', 'localhost')
        self.redis_port = int(os.getenv('REDIS_PORT', 6379))
        self.solve_timeout = float(os.getenv('SOLVE_TIMEOUT', 10))
        self.puzzles_path = puzzles_path or os.getenv('PUZZLES_PATH', DEFAULT_PUZZLES_PATH)
        self.puzzles = self._load_puzzles()

    def require_bot_settings(self):
        """Validate the environment variables the Discord bot needs."""
        if not all([
            self.discord_token,
            self.owner_id
        ]):
            raise ValueError("Missing required environment variables")

    def get_puzzle(self, name: str) -> Puzzle:
        if name not in self.puzzles:
            raise ValueError(f"Unknown puzzle: {name}. Available: {', '.join(self.puzzles) or 'none'}")
        return self.puzzles[name]

    def _load_puzzles(self) -> dict[str, Puzzle]:
        if not os.path.exists(self.puzzles_path):
            logger.warning("Puzzle file not found: %s", self.puzzles_path)
            return {}

        try:
            with open(self.puzzles_path, 'r', encoding='utf-8') as f:
                puzzles_data = yaml.safe_load(f)

            if not puzzles_data:
                logger.warning("Empty puzzle file: %s", self.puzzles_path)
                return {}

            puzzles = {}
            for name, data in puzzles_data.items():
                if not data.get('numbers'):
                    raise ValueError(f"Puzzle {name} has no numbers")
                puzzles[name] = Puzzle(
                    numbers=[int(n) for n in data['numbers']],
                    target=int(data['target']),
                    name=name,
                    description=data.get('description', '')
                )
            logger.info("Loaded %d puzzles from %s", len(puzzles), self.puzzles_path)
            return puzzles
        except yaml.YAMLError as e:
            logger.error("YAML parsing error: %s", e)
            raise
        except Exception as e:
            logger.error("Error loading puzzles: %s", e)
            raise ValueError(f"Failed to load puzzles: {str(e)}")
