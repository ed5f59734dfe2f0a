"""Embedded default config documents.

Each document has the same shape as its JSON file under ``definitions/``.
Repositories fall back to these when a file is missing or malformed.
"""
from __future__ import annotations

from typing import Any, Dict

Document = Dict[str, Any]

_WEATHER_MULTIPLIERS_NEUTRAL = {
    "clear": 1.0,
    "storm": 1.0,
    "heat_wave": 1.0,
    "cold_snap": 1.0,
    "smoke": 1.0,
}

WEATHER: Document = {
    "limits": {
        "max_extreme_streak": 2,
        "encounter_cap": 0.35,
        "pants_floor": 0,
        "pants_ceiling": 100,
    },
    "effects": {
        "clear": {"supplies": 0, "sanity": 0, "pants": 0, "encounter_delta": 0.0, "travel_mult": 1.0},
        "storm": {"supplies": -1, "sanity": 0, "pants": 2, "encounter_delta": 0.05, "travel_mult": 0.85},
        "heat_wave": {"supplies": 0, "sanity": 0, "pants": 1, "encounter_delta": 0.03, "travel_mult": 0.9},
        "cold_snap": {"supplies": 0, "sanity": 0, "pants": 1, "encounter_delta": 0.02, "travel_mult": 0.9},
        "smoke": {"supplies": 0, "sanity": 0, "pants": 2, "encounter_delta": 0.04, "travel_mult": 0.88},
    },
    "mitigation": {
        "storm": {"tag": "rain_gear", "pants": 0},
        "heat_wave": {"tag": "water_jugs", "pants": 0},
        "cold_snap": {"tag": "warm_coat", "pants": 0},
        "smoke": {"tag": "respirator", "pants": 0},
    },
    "weights": {
        "heartland": {"clear": 50, "storm": 15, "heat_wave": 12, "cold_snap": 13, "smoke": 10},
        "rust_belt": {"clear": 45, "storm": 18, "heat_wave": 10, "cold_snap": 15, "smoke": 12},
        "beltway": {"clear": 48, "storm": 14, "heat_wave": 14, "cold_snap": 10, "smoke": 14},
    },
}

CROSSINGS: Document = {
    "milestones": [650.0, 1250.0, 1900.0],
    "permit_tags": ["permit", "press_pass"],
    "consumable_permit_tags": ["permit"],
    "storm_detour_pants": 1,
    "detour_days_min": 2,
    "detour_days_max": 4,
    "allow_negative_budget": False,
    "exec_bribe_scale": {"shutdown": 0.5},
    "costs": {
        "checkpoint": {
            "detour_supplies": 2,
            "detour_pants": 1,
            "bribe_cost_cents": 1000,
            "permit_credibility": 1,
        },
        "bridge_out": {
            "detour_supplies": 3,
            "detour_pants": 2,
            "bribe_cost_cents": 1500,
            "permit_credibility": 1,
        },
    },
    "odds": {
        "classic": {
            "balanced": {"detour_probability": 0.90, "bribe_success": 0.82},
            "aggressive": {"detour_probability": 0.86, "bribe_success": 0.76},
            "conservative": {"detour_probability": 0.92, "bribe_success": 0.86},
            "resource_manager": {"detour_probability": 0.91, "bribe_success": 0.84},
        },
        "deep": {
            "balanced": {"detour_probability": 0.84, "bribe_success": 0.80},
            "aggressive": {"detour_probability": 0.80, "bribe_success": 0.78},
            "conservative": {"detour_probability": 0.88, "bribe_success": 0.80},
            "resource_manager": {"detour_probability": 0.86, "bribe_success": 0.82},
        },
    },
}

BOSS: Document = {
    "distance_required": 2100.0,
    "rounds": 3,
    "sanity_loss_per_round": 2,
    "pants_gain_per_round": 4,
    "base_victory_chance": 0.11,
    "credibility_weight": 0.012,
    "sanity_weight": 0.01,
    "supplies_weight": 0.004,
    "allies_weight": 0.015,
    "pants_penalty_weight": 0.005,
    "score_weight": 0.25,
    "min_chance": 0.08,
    "max_chance": 0.65,
    "deep_aggressive_bonus": 0.05,
    "score_threshold": {"classic": 1000, "deep": 1200},
}

CAMP: Document = {
    "therapy_sanity_ceiling": 9,
    "rest": {"days": 1, "supplies": -1, "hp": 2, "sanity": 1, "pants": -3, "cooldown_days": 2},
    "forage": {"days": 1, "supplies": 2, "bonus_max": 2, "cooldown_days": 1},
    "therapy": {"days": 1, "sanity": 2, "pants": -5, "budget_cents": 500, "cooldown_days": 3},
    "repair_spare": {"days": 0, "vehicle_repair": 10.0, "cooldown_days": 0},
    "repair_hack": {"days": 1, "vehicle_repair": 4.0, "wear_delta": 5.0, "cooldown_days": 2},
}

PACING: Document = {
    "paces": {
        "steady": {"distance_mult": 1.0, "encounter_delta": 0.0, "sanity": 0, "pants": 0},
        "heated": {"distance_mult": 1.0, "encounter_delta": 0.03, "sanity": 0, "pants": 0},
        "blitz": {"distance_mult": 1.0, "encounter_delta": 0.06, "sanity": 0, "pants": 1},
    },
    "diets": {
        "quiet": {"sanity": 0, "pants": -1},
        "mixed": {"sanity": 0, "pants": 0},
        "doom": {"sanity": 0, "pants": 1},
    },
    "limits": {
        "encounter_base": 0.27,
        "encounter_floor": 0.0,
        "encounter_ceiling": 0.6,
        "pants_floor": 0,
        "pants_ceiling": 100,
        "passive_relief": -1,
        "passive_relief_threshold": 20,
        "boss_pants_cap": 0,
        "distance_penalty_floor": 0.6,
    },
}

ENDGAME: Document = {
    "enabled": True,
    "policies": {
        "deep_balanced": {
            "mi_start": 1850.0,
            "failure_guard_miles": 1950.0,
            "health_floor": 40.0,
            "wear_reset": 0.0,
            "cooldown_days": 3,
            "partial_ratio": 0.45,
            "wear_multiplier": 1.0,
            "resource_priority": ["matching_spare", "any_spare", "emergency"],
        },
        "deep_aggressive": {
            "mi_start": 1800.0,
            "failure_guard_miles": 1950.0,
            "health_floor": 45.0,
            "wear_reset": 0.0,
            "cooldown_days": 3,
            "partial_ratio": 0.5,
            "wear_multiplier": 0.9,
            "resource_priority": ["matching_spare", "any_spare", "emergency"],
        },
        "deep_conservative": {
            "mi_start": 1850.0,
            "failure_guard_miles": 1950.0,
            "health_floor": 40.0,
            "wear_reset": 0.0,
            "cooldown_days": 4,
            "partial_ratio": 0.45,
            "wear_multiplier": 0.85,
            "resource_priority": ["matching_spare", "any_spare", "emergency"],
        },
        "deep_resource_manager": {
            "mi_start": 1850.0,
            "failure_guard_miles": 1950.0,
            "health_floor": 40.0,
            "wear_reset": 10.0,
            "cooldown_days": 3,
            "partial_ratio": 0.45,
            "wear_multiplier": 1.0,
            "resource_priority": ["any_spare", "matching_spare", "emergency"],
        },
    },
}

RESULT: Document = {
    "pants_threshold": 70,
    "pants_penalty_per_point": 2,
    "rounding": "nearest",
    "final_min": 0,
    "final_max": 999999,
    "score_mult": 1.0,
    "display_bonus_deep": 0.05,
}

EXEC_ORDERS: Document = {
    "daily_chance": 0.06,
    "duration_min": 2,
    "duration_max": 4,
    "cooldown_min": 6,
    "cooldown_max": 9,
    "travel_mult_floor": 0.72,
    "breakdown_bonus_cap": 0.2,
    "orders": {
        "shutdown": {"supplies": 1, "sanity": 0, "travel_mult": 0.9, "breakdown_bonus": 0.0, "encounter_delta": 0.02},
        "militarize": {"supplies": 1, "sanity": 0, "travel_mult": 0.95, "breakdown_bonus": 0.0, "encounter_delta": 0.05},
        "deregulate": {"supplies": 0, "sanity": 1, "travel_mult": 1.0, "breakdown_bonus": 0.1, "encounter_delta": 0.0},
        "tax_cuts": {"supplies": 0, "sanity": 0, "travel_mult": 1.0, "breakdown_bonus": 0.0, "encounter_delta": 0.0},
        "tariffs": {"supplies": 1, "sanity": 0, "travel_mult": 0.88, "breakdown_bonus": 0.05, "encounter_delta": 0.0},
        "gag": {"supplies": 0, "sanity": 1, "travel_mult": 1.0, "breakdown_bonus": 0.0, "encounter_delta": 0.03},
    },
}

_FAMILY_BASE: Document = {
    "travel": {
        "mpd_base": 12.0,
        "mpd_min": 6.0,
        "mpd_max": 22.0,
        "pace_factor": {"steady": 1.0, "heated": 1.2, "blitz": 1.35},
        "weather_factor": {"clear": 1.0, "storm": 0.85, "heat_wave": 0.8, "cold_snap": 0.9, "smoke": 0.88},
    },
    "wear": {"base": 0.2, "fatigue_k": 0.0, "comfort_miles": 1200.0},
    "breakdown": {
        "base": 0.04,
        "beta": 0.2,
        "extreme_weather_bonus": 0.04,
        "critical_bonus": 0.05,
        "pace_factor": {"steady": 0.95, "heated": 1.0, "blitz": 1.1},
        "weather_factor": {"clear": 1.0, "storm": 1.3, "heat_wave": 1.4, "cold_snap": 1.1, "smoke": 1.1},
    },
    "part_weights": {"tire": 50, "battery": 20, "alternator": 15, "fuel_pump": 15},
    "daily": {
        "supplies": {
            "base": 0.1,
            "pace": {"steady": 1.0, "heated": 1.1, "blitz": 1.25},
            "diet": {"quiet": 0.8, "mixed": 1.0, "doom": 1.2},
            "weather": dict(_WEATHER_MULTIPLIERS_NEUTRAL),
            "exec": {},
        },
        "sanity": {
            "base": 0.05,
            "pace": {"steady": 1.0, "heated": 1.0, "blitz": 1.5},
            "diet": {"quiet": 0.5, "mixed": 1.0, "doom": 2.0},
            "weather": dict(_WEATHER_MULTIPLIERS_NEUTRAL),
            "exec": {},
        },
        "health": {"decay": 0.0, "rest_heal": 1.0, "weather": {}, "exec": {}},
    },
    "partial_ratio": 0.5,
    "victory_miles": 2100.0,
    "stop_cap": 1,
    "stop_cap_window": 10,
}

JOURNEY: Document = {
    "families": {
        "classic": _FAMILY_BASE,
        "deep": {
            "travel": {"mpd_base": 13.5, "mpd_max": 24.0},
            "wear": {"fatigue_k": 0.3},
        },
    },
    "family_parent": {"deep": "classic"},
    "overlays": {
        "aggressive": {"partial_ratio": 0.45, "wear": {"base": 0.24}, "travel": {"mpd_max": 26.0}},
        "conservative": {"breakdown": {"base": 0.036}, "travel": {"mpd_max": 20.0}},
        "resource_manager": {"part_weights": {"tire": 40, "fuel_pump": 25}},
        "deep_conservative": {"stop_cap": 2},
    },
}

ENCOUNTERS: Document = {
    "encounters": [
        {
            "id": "roadside_rally",
            "name": "Roadside Rally",
            "weight": 6,
            "choices": [
                {"label": "Join the crowd", "effects": {"morale": 1, "pants": 2, "credibility": 1}},
                {"label": "Drive past", "effects": {"sanity": -1}},
            ],
        },
        {
            "id": "hitchhiker",
            "name": "Hitchhiker",
            "weight": 5,
            "choices": [
                {"label": "Offer a ride", "effects": {"allies": 1, "supplies": -1}},
                {"label": "Keep going", "effects": {}},
            ],
        },
        {
            "id": "fuel_scare",
            "name": "Fuel Scare",
            "weight": 4,
            "regions": ["rust_belt", "beltway"],
            "choices": [
                {"label": "Pay the surge price", "effects": {"budget_cents": -800, "sanity": 1}},
                {"label": "Wait it out", "effects": {"rest": True, "pants": 1}},
            ],
        },
        {
            "id": "flooded_underpass",
            "name": "Flooded Underpass",
            "weight": 3,
            "hard_stop": True,
            "choices": [
                {"label": "Turn around", "effects": {"sanity": -1}},
                {"label": "Push through", "effects": {"hp": -1, "pants": 3}},
            ],
        },
        {
            "id": "farm_stand",
            "name": "Farm Stand",
            "weight": 5,
            "regions": ["heartland"],
            "choices": [
                {"label": "Stock up", "effects": {"supplies": 3, "budget_cents": -500}},
                {"label": "Chat with the owner", "effects": {"morale": 1, "sanity": 1}},
            ],
        },
        {
            "id": "press_scrum",
            "name": "Press Scrum",
            "weight": 3,
            "regions": ["beltway"],
            "choices": [
                {"label": "Give a statement", "effects": {"credibility": 2, "pants": 4}},
                {"label": "Ask for credentials", "effects": {"add_tag": "press_pass", "sanity": -1}},
            ],
        },
        {
            "id": "tailwind",
            "name": "Tailwind",
            "weight": 4,
            "choices": [
                {"label": "Ride it", "effects": {"travel_bonus_ratio": 0.25}},
                {"label": "Take it easy", "effects": {"pants": -2}},
            ],
        },
        {
            "id": "permit_office",
            "name": "Permit Office",
            "weight": 2,
            "modes": ["deep"],
            "choices": [
                {"label": "File the paperwork", "effects": {"add_tag": "permit", "budget_cents": -1200, "sanity": -1}},
                {"label": "Skip it", "effects": {}},
            ],
        },
    ]
}

ALL_DOCUMENTS: Dict[str, Document] = {
    "weather.json": WEATHER,
    "crossings.json": CROSSINGS,
    "boss.json": BOSS,
    "camp.json": CAMP,
    "pacing.json": PACING,
    "endgame.json": ENDGAME,
    "result.json": RESULT,
    "exec_orders.json": EXEC_ORDERS,
    "journey.json": JOURNEY,
    "encounters.json": ENCOUNTERS,
}
