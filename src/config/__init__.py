# Configuration and preset puzzles
