"""
Block placement engine: turns weekly goals into proposed focus blocks.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Mapping, Optional, Sequence, Set

from .clock import TimezoneClock, to_utc
from .constants import STEP_MINUTES
from .time_slot import TimeSlot, AVAILABLE, BUSY
from ..algorithms.chunking import session_plan, next_session_minutes, ideal_days, sort_goals_for_placement
from ..constraints.time_constraints import window_for, parse_hhmm
from ..scoring.slot_scoring import calculate_slot_score, pick_best_candidate
from ..scoring.workload_scoring import order_days_for_goal
from ..utils.slot_utils import compute_free_slots, effective_capacity_minutes, has_conflict

logger = logging.getLogger(__name__)


class DayPlan:
    """Per-run bookkeeping for one local day of the week being scheduled."""

    def __init__(self, key: str, day: date, window: TimeSlot, slots: List[TimeSlot], capacity: int):
        self.key = key
        self.day = day
        self.window = window
        self.slots = slots
        self.capacity = capacity
        self.usage = 0
        self.goal_ids: Set[str] = set()

    def is_full(self) -> bool:
        return self.usage >= self.capacity

    def __repr__(self):
        return f"DayPlan({self.key}, usage={self.usage}/{self.capacity}, slots={len(self.slots)})"


# ================================
# INITIALIZATION & SETUP
# ================================

class FocusBlockScheduler:
    """
    Day-balanced greedy placement of focus blocks into the free time of a week.

    The instance only holds configuration; every place_blocks() call builds
    its own day plans, so one scheduler can serve concurrent calls.
    """
    def __init__(self, working_window: Mapping, timezone: str, block_length_minutes: int,
                 min_gap_minutes: int, step_minutes: int = STEP_MINUTES):
        self.working_window = working_window
        self.clock = TimezoneClock(timezone)
        self.block_length_minutes = block_length_minutes
        self.min_gap_minutes = min_gap_minutes
        self.step_minutes = step_minutes

    def _get_days_in_range(self, week_start: datetime, week_end: datetime) -> List[date]:
        """Distinct local dates of week_start + k days, for every such instant before week_end."""
        days: List[date] = []
        current = week_start
        while current < week_end:
            day = self.clock.local_date(current)
            if day not in days:
                days.append(day)
            current += timedelta(days=1)
        return days

    def build_day_plans(self, busy_slots: Sequence[TimeSlot], week_start: datetime, week_end: datetime) -> Dict[str, DayPlan]:
        """Working window, free slots and effective capacity for every usable day."""
        plans: Dict[str, DayPlan] = {}
        for day in self._get_days_in_range(week_start, week_end):
            window = window_for(day, self.working_window, self.clock)
            if window is None:
                continue

            free_slots = compute_free_slots(window, busy_slots, self.min_gap_minutes)
            capacity = effective_capacity_minutes(free_slots, self.block_length_minutes, self.min_gap_minutes)
            if capacity <= 0:
                logger.debug(f"Skipping {day.isoformat()}: no room for a {self.block_length_minutes} minute block")
                continue

            key = day.isoformat()
            plans[key] = DayPlan(key, day, window, free_slots, capacity)
        return plans

# ================================
# CORE SCHEDULING LOGIC
# ================================

    def place_blocks(self, goals: Sequence, busy_slots: Sequence[TimeSlot], week_start: datetime, week_end: datetime) -> dict:
        """
        Place every goal's sessions into the week [week_start, week_end).

        Returns a dict with the proposed blocks (sorted by start), the total
        effective capacity, the total requested minutes and, when some goal
        could not be fully placed, a shortfall list.
        """
        week_start = to_utc(week_start)
        week_end = to_utc(week_end)
        busy_slots = [TimeSlot(to_utc(slot.start), to_utc(slot.end), BUSY) for slot in busy_slots]

        plans = self.build_day_plans(busy_slots, week_start, week_end)
        available_minutes = sum(plan.capacity for plan in plans.values())
        requested_minutes = sum(goal.target_minutes_per_week for goal in goals)

        logger.info(
            f"Placing {len(goals)} goal(s) into {len(plans)} day(s): "
            f"{requested_minutes} min requested, {available_minutes} min available"
        )

        proposed: List[dict] = []
        shortfall: List[dict] = []

        for goal in sort_goals_for_placement(list(goals)):
            remaining = self._place_goal(goal, plans, proposed, busy_slots)
            if remaining is not None:
                shortfall.append({
                    "goal_id": goal.id,
                    "name": goal.name,
                    "remaining_minutes": remaining,
                })

        proposed.sort(key=lambda block: block["start"])

        result = {
            "blocks": proposed,
            "available_minutes": available_minutes,
            "requested_minutes": requested_minutes,
        }
        if shortfall:
            logger.warning(f"Could not fully place {len(shortfall)} goal(s): {[item['name'] for item in shortfall]}")
            result["shortfall"] = shortfall
        return result

    def _place_goal(self, goal, plans: Dict[str, DayPlan], proposed: List[dict], busy_slots: Sequence[TimeSlot]) -> Optional[int]:
        """
        Place one goal's sessions. Returns the unplaced minutes when the goal
        falls short, None when it was fully placed.
        """
        has_fixed_sessions = bool(goal.sessions_per_week)
        session_minutes, target_sessions = session_plan(
            goal.target_minutes_per_week, goal.sessions_per_week, self.block_length_minutes
        )
        available_days = sorted(plans.keys())
        ideal = ideal_days(available_days, target_sessions)

        remaining = goal.target_minutes_per_week
        sessions_placed = 0

        while available_days and (sessions_placed < target_sessions if has_fixed_sessions else remaining > 0):
            duration = next_session_minutes(session_minutes, remaining, has_fixed_sessions)
            if duration <= 0:
                break

            placed = False
            for plan in order_days_for_goal(plans.values(), goal.id, ideal):
                if plan.is_full():
                    continue

                block = self._try_place_block_on_day(plan, goal, proposed, duration, busy_slots)
                if block is None:
                    continue

                proposed.append(block)
                plan.usage += duration
                plan.goal_ids.add(goal.id)
                remaining -= duration
                sessions_placed += 1
                placed = True
                logger.debug(f"Placed {duration} min of '{goal.name}' on {plan.key} at {block['start'].isoformat()}")
                break

            # No day accepted a block: further passes would see the same days
            if not placed:
                break

        if remaining > 0 and (not has_fixed_sessions or sessions_placed < target_sessions):
            return remaining
        return None

# ================================
# SLOT FINDING & OPTIMIZATION
# ================================

    def _preferred_window(self, goal, day: date) -> Optional[TimeSlot]:
        if goal.preferred_time is None:
            return None
        return TimeSlot(
            self.clock.at(day, parse_hhmm(goal.preferred_time.start)),
            self.clock.at(day, parse_hhmm(goal.preferred_time.end)),
            AVAILABLE,
        )

    def _candidate_slots(self, plan: DayPlan, preferred_window: Optional[TimeSlot], busy_slots: Sequence[TimeSlot]) -> List[TimeSlot]:
        """Free slots of the day, plus the preferred window when nothing busy touches it."""
        candidates = list(plan.slots)
        if preferred_window is not None and not has_conflict(preferred_window, busy_slots):
            candidates.append(preferred_window)
        return candidates

    def _generate_candidate_starts(self, slot: TimeSlot, duration_minutes: int) -> List[TimeSlot]:
        """Candidate block positions at fixed steps inside one slot."""
        candidates = []
        duration = timedelta(minutes=duration_minutes)
        step = timedelta(minutes=self.step_minutes)
        current_start = slot.start
        while current_start + duration <= slot.end:
            candidates.append(TimeSlot(current_start, current_start + duration, AVAILABLE))
            current_start += step
        return candidates

    def _try_place_block_on_day(self, plan: DayPlan, goal, proposed: List[dict], duration_minutes: int,
                                busy_slots: Sequence[TimeSlot]) -> Optional[dict]:
        """Score every candidate position on the day and build a block at the best one."""
        preferred_window = self._preferred_window(goal, plan.day)
        proposed_slots = [TimeSlot(block["start"], block["end"], block["goal_id"]) for block in proposed]

        scored_candidates = []
        for slot in self._candidate_slots(plan, preferred_window, busy_slots):
            for candidate in self._generate_candidate_starts(slot, duration_minutes):
                if has_conflict(candidate, proposed_slots, self.min_gap_minutes):
                    continue
                scored_candidates.append((calculate_slot_score(candidate, preferred_window, self.clock), candidate))

        best = pick_best_candidate(scored_candidates)
        if best is None:
            return None

        return {
            "goal_id": goal.id,
            "goal_name": goal.name,
            "start": best.start,
            "end": best.end,
            "duration": duration_minutes,
        }

    def __repr__(self):
        return f"FocusBlockScheduler({self.clock.timezone_name}, block={self.block_length_minutes}m, gap={self.min_gap_minutes}m)"
