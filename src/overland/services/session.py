"""Journey session: one run's state, its RNG streams and the player's actions."""
from __future__ import annotations

import logging

from overland.core.numbers import U64_MASK
from overland.core.rng import RngBundle
from overland.core.types import DIETS, GAME_MODES, PACES, PARTS, STRATEGIES, DietId, GameMode, PaceId, Part, StrategyId
from overland.domain.boss import BossOutcome
from overland.domain.camp import CampOutcome
from overland.domain.encounters import EncounterResolution
from overland.domain.scoring import ResultSummary
from overland.domain.share_code import encode_friendly, parse_share_code
from overland.domain.state import GameState, new_game_state
from overland.services.config_service import GameConfig, load_game_config
from overland.services.errors import SessionError
from overland.services.journey_controller import JourneyController
from overland.services.journey_kernel import DayOutcome

LOG = logging.getLogger(__name__)


class JourneySession:
    """Owns a GameState and the RNG bundle that drives it.

    Every random draw of the run comes from ``rngs``; the same seed and the
    same sequence of calls always reproduce the same run.
    """

    def __init__(
        self,
        state: GameState,
        rngs: RngBundle,
        config: GameConfig,
        controller: JourneyController | None = None,
    ) -> None:
        self._state = state
        self._rngs = rngs
        self._config = config
        self._controller = controller or JourneyController(config)

    @classmethod
    def new(
        cls,
        mode: GameMode,
        strategy: StrategyId,
        seed: int,
        config: GameConfig | None = None,
    ) -> "JourneySession":
        if mode not in GAME_MODES:
            raise SessionError(f"Unknown game mode '{mode}'.")
        if strategy not in STRATEGIES:
            raise SessionError(f"Unknown strategy '{strategy}'.")
        config = config or load_game_config()
        seed &= U64_MASK
        state = new_game_state(seed, mode, strategy, config.journey.resolve(mode, strategy))
        LOG.info("new %s/%s journey seed=%s", mode, strategy, seed)
        return cls(state, RngBundle.from_user_seed(seed), config)

    @classmethod
    def from_share_code(
        cls,
        code: str,
        strategy: StrategyId = "balanced",
        config: GameConfig | None = None,
    ) -> "JourneySession":
        """Start the run a share code describes. Raises ShareCodeError on a bad code."""
        mode, seed = parse_share_code(code)
        return cls.new(mode, strategy, seed, config)

    @classmethod
    def from_state(
        cls,
        state: GameState,
        config: GameConfig | None = None,
        rngs: RngBundle | None = None,
    ) -> "JourneySession":
        """Resume a run; without saved streams the RNG restarts from the seed."""
        config = config or load_game_config()
        return cls(state, rngs or RngBundle.from_user_seed(state.seed), config)

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def rngs(self) -> RngBundle:
        return self._rngs

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def is_over(self) -> bool:
        return self._state.is_over

    # ------------------------------------------------------------------
    # Day flow
    # ------------------------------------------------------------------
    def _require_running(self, action: str) -> None:
        if self._state.is_over:
            raise SessionError(f"Cannot {action}: the journey has ended.")

    def _require_no_encounter(self, action: str) -> None:
        if self._state.current_encounter is not None:
            raise SessionError(f"Cannot {action} while an encounter is waiting for a choice.")

    def tick_day(self) -> DayOutcome:
        self._require_running("advance the day")
        self._require_no_encounter("advance the day")
        return self._controller.tick_day(self._state, self._rngs)

    def apply_choice(self, choice_index: int) -> EncounterResolution:
        self._require_running("resolve an encounter")
        if self._state.current_encounter is None:
            raise SessionError("No encounter is waiting for a choice.")
        try:
            return self._controller.apply_choice(self._state, choice_index)
        except LookupError as exc:
            raise SessionError(str(exc)) from exc

    # ------------------------------------------------------------------
    # Camp
    # ------------------------------------------------------------------
    def _require_camp(self, action: str) -> None:
        self._require_running(action)
        self._require_no_encounter(action)

    def camp_rest(self) -> CampOutcome:
        self._require_camp("rest")
        return self._controller.camp_rest(self._state)

    def camp_forage(self) -> CampOutcome:
        self._require_camp("forage")
        return self._controller.camp_forage(self._state, self._rngs)

    def camp_therapy(self) -> CampOutcome:
        self._require_camp("take therapy")
        return self._controller.camp_therapy(self._state)

    def camp_repair_spare(self, part: Part) -> CampOutcome:
        self._require_camp("repair")
        if part not in PARTS:
            raise SessionError(f"Unknown part '{part}'.")
        return self._controller.camp_repair_spare(self._state, part)

    def camp_repair_hack(self) -> CampOutcome:
        self._require_camp("repair")
        return self._controller.camp_repair_hack(self._state)

    # ------------------------------------------------------------------
    # Boss and results
    # ------------------------------------------------------------------
    def attempt_boss(self) -> BossOutcome:
        self._require_running("face the boss")
        self._require_no_encounter("face the boss")
        if not self._state.boss_ready or self._state.boss_attempted:
            raise SessionError("The boss is not available.")
        return self._controller.attempt_boss(self._state, self._rngs)

    def summary(self) -> ResultSummary:
        return self._controller.summary(self._state)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------
    def set_pace(self, pace: PaceId) -> None:
        if pace not in PACES:
            raise SessionError(f"Unknown pace '{pace}'.")
        self._state.pace = pace

    def set_diet(self, diet: DietId) -> None:
        if diet not in DIETS:
            raise SessionError(f"Unknown diet '{diet}'.")
        self._state.diet = diet

    def set_bribe_intent(self, enabled: bool) -> None:
        self._state.auto_bribe = bool(enabled)

    def reseed(self, seed: int) -> None:
        """Replace the seed and restart every RNG stream from it."""
        seed &= U64_MASK
        self._state.seed = seed
        self._rngs = RngBundle.from_user_seed(seed)
        LOG.info("session reseeded on day %s: %s", self._state.day, seed)

    def share_code(self) -> str:
        return encode_friendly(self._state.mode == "deep", self._state.seed)

    def into_state(self) -> GameState:
        return self._state


__all__ = ["JourneySession"]
