"""Net sync log type names recognised as keywords by default."""

from __future__ import annotations

NET_SYNC_LOG_TYPES: tuple[str, ...] = (
    "GameLog",
    "ChangeZone",
    "ChangedPlayer",
    "AddedCombatant",
    "RemovedCombatant",
    "PartyList",
    "PlayerStats",
    "StartsUsing",
    "Ability",
    "NetworkAOEAbility",
    "NetworkCancelAbility",
    "NetworkDoT",
    "WasDefeated",
    "GainsEffect",
    "HeadMarker",
    "NetworkRaidMarker",
    "NetworkTargetMarker",
    "LosesEffect",
    "NetworkGauge",
    "NetworkWorld",
    "ActorControl",
    "NameToggle",
    "Tether",
    "LimitBreak",
    "NetworkEffectResult",
    "StatusEffect",
    "NetworkUpdateHP",
    "Map",
    "SystemLogMessage",
    "StatusList3",
    "ParserInfo",
    "ProcessInfo",
    "Debug",
    "PacketDump",
    "Version",
    "Error",
    "None",
    "LineRegistration",
    "MapEffect",
    "FateDirector",
    "CEDirector",
    "InCombat",
    "CombatantMemory",
    "RSVData",
    "StartsUsingExtra",
    "AbilityExtra",
    "ContentFinderSettings",
)
