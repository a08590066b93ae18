import os
import yaml
from pathlib import Path
from pydantic import BaseModel, Field, model_validator
from typing import Dict, List, Optional, Tuple

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "bracket.yaml"

class FinalStageConfig(BaseModel):
    region: str = "Final Four"
    semifinals: List[Tuple[str, str]] = Field(default_factory=list)

class BracketLayout(BaseModel):
    regions: List[str] = Field(default_factory=list)
    final_stage: FinalStageConfig = Field(default_factory=FinalStageConfig)
    round_labels: Dict[int, str] = Field(default_factory=dict)
    round1_pairings: Dict[int, List[Tuple[int, int]]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def default_semifinals(self):
        # Without explicit pairs, regions meet in listed order: 1v2, 3v4, ...
        if not self.final_stage.semifinals and len(self.regions) > 1 and len(self.regions) % 2 == 0:
            self.final_stage.semifinals = [
                (self.regions[i], self.regions[i + 1]) for i in range(0, len(self.regions), 2)
            ]
        return self

    @property
    def final_region(self) -> str:
        return self.final_stage.region

    def semifinal_regions(self, match_order: int) -> Optional[Tuple[str, str]]:
        """Regions whose champions meet in the given semifinal (1-based), if configured."""
        if 1 <= match_order <= len(self.final_stage.semifinals):
            return self.final_stage.semifinals[match_order - 1]
        return None

    def round_label(self, round_number: int) -> str:
        return self.round_labels.get(round_number, f"Round {round_number}")

class BracketRegistry:
    def __init__(self, config_path: Optional[str] = None):
        path = config_path or os.getenv("BRACKET_CONFIG") or str(DEFAULT_CONFIG_PATH)
        self.layout = self._load(path)

    def _load(self, path: str) -> BracketLayout:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        return BracketLayout(**data)

    def get(self) -> BracketLayout:
        return self.layout

# Singleton instance
registry = BracketRegistry()
