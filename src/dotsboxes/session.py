"""
Session facade: owns one live game and drives the automated side.

The ai's replies either run inline (delay == 0, used by tests and the CLI)
or are deferred on a cancellable timer so a front end can show each move.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from .engine import apply_move
from .game_basics import AI, DEFAULT_SIZE, PLAYER, Edge, GameState, is_terminal, new_game
from .solver import choose_automated_move


class GameSession:
    def __init__(self, size: int = DEFAULT_SIZE, delay: float = 0.0,
                 on_update: Optional[Callable[[GameState], None]] = None) -> None:
        self.size = size
        self.delay = delay
        self.on_update = on_update
        self.state = new_game(size)
        self.ai_moves: List[Edge] = []
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None

    def reset(self, first: str = PLAYER) -> GameState:
        with self._lock:
            self.cancel_pending()
            self.state = new_game(self.size)
            self.state.turn = first
            self.ai_moves = []
        if first == AI:
            self._schedule_ai()
        return self.state

    def submit(self, edge: Edge) -> bool:
        """Play a human edge; the ai answers if the turn passes to it."""
        with self._lock:
            if self.state.turn != PLAYER or is_terminal(self.state):
                return False
            accepted, _ = apply_move(self.state, edge, PLAYER)
        if not accepted:
            return False
        self._notify()
        self._schedule_ai()
        return True

    def play_ai_turn(self) -> List[Edge]:
        """Let the ai move until it loses the turn or the game ends."""
        played: List[Edge] = []
        with self._lock:
            self._timer = None
            while self.state.turn == AI and not is_terminal(self.state):
                mv = choose_automated_move(self.state)
                if mv is None:
                    break
                accepted, _ = apply_move(self.state, mv, AI)
                if not accepted:
                    break
                logging.debug("ai drew %s, score %s", mv, self.state.scores)
                played.append(mv)
                self.ai_moves.append(mv)
                if self.delay > 0 and self.state.turn == AI and not is_terminal(self.state):
                    # pace extra turns one move at a time
                    self._timer = self._start_timer()
                    break
        if played:
            self._notify()
        return played

    def cancel_pending(self) -> bool:
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        return True

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _schedule_ai(self) -> None:
        with self._lock:
            if self.state.turn != AI or is_terminal(self.state):
                return
            if self.delay <= 0:
                self.play_ai_turn()
                return
            if self._timer is None:
                self._timer = self._start_timer()

    def _start_timer(self) -> threading.Timer:
        timer = threading.Timer(self.delay, self.play_ai_turn)
        timer.daemon = True
        timer.start()
        return timer

    def _notify(self) -> None:
        if self.on_update is not None:
            self.on_update(self.state)
