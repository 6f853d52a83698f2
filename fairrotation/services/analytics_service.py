"""Role analytics: post-match role points and squad fairness reports."""

from __future__ import annotations

import csv
import io
import math
import statistics
from collections import Counter
from typing import Iterable, List, Optional

from ..models import Player, PlayerRoleSummary, PlayerStats, RolePoints, RoleReport
from ..models.player import OUTFIELD_ROLES, Role
from ..utils.constants import (
    FAIRNESS_ORDER, FAIRNESS_THRESHOLD_SECONDS, ROLE_POINTS_STEP, ROLE_POINTS_TOTAL
)
from ..utils.time_utils import fmt_mmss


def _round_to_step(value: float, step: float = ROLE_POINTS_STEP) -> float:
    """Round half-up to the nearest ``step``."""
    return math.floor(value / step + 0.5) * step


def calculate_role_points(stats: PlayerStats) -> RolePoints:
    """
    Convert a player's match into role points.

    Goalie periods score one point each. The remaining points up to
    ROLE_POINTS_TOTAL are split over outfield roles by share of time and
    rounded to the nearest half point; any rounding difference goes to the
    role with the most time.

    Args:
        stats: Player statistics for the match

    Returns:
        RolePoints for goalie, defender, midfielder and attacker
    """
    goalie_points = stats.periods_as_goalie or 0
    outfield_points = max(0, ROLE_POINTS_TOTAL - goalie_points)

    times = {role: stats.role_seconds(role) or 0 for role in OUTFIELD_ROLES}
    total_time = sum(times.values())
    if total_time <= 0 or outfield_points == 0:
        return RolePoints(goalie=goalie_points)

    points = {
        role: _round_to_step(outfield_points * seconds / total_time)
        for role, seconds in times.items()
    }
    difference = outfield_points - sum(points.values())
    if difference:
        # max() keeps the first of equal values: defender, then midfielder
        busiest = max(OUTFIELD_ROLES, key=lambda role: times[role])
        points[busiest] += difference

    return RolePoints(
        goalie=goalie_points,
        defender=points[Role.DEFENDER],
        midfielder=points[Role.MIDFIELDER],
        attacker=points[Role.ATTACKER],
    )


class RoleReportExporter:
    """Writes a RoleReport as CSV."""

    def export_to_csv(self, report: RoleReport) -> str:
        """
        Export a role report.

        Raises:
            ValueError: If the report has no players
        """
        if not report.players:
            raise ValueError("Cannot export role analytics without any players")

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Squad Size", report.squad_size])
        writer.writerow(["Average Outfield Time", fmt_mmss(report.average_seconds)])
        writer.writerow(["Minimum Outfield Time", fmt_mmss(report.min_seconds)])
        writer.writerow(["Maximum Outfield Time", fmt_mmss(report.max_seconds)])
        writer.writerow([])
        writer.writerow([
            "Player", "Inactive", "Outfield Time", "Goalie Time",
            "Goalie Pts", "Defender Pts", "Midfielder Pts", "Attacker Pts",
            "Defender %", "Midfielder %", "Attacker %", "Delta Seconds", "Fairness",
        ])
        for summary in report.players:
            writer.writerow([
                summary.display_name or summary.player_id,
                "yes" if summary.is_inactive else "no",
                fmt_mmss(summary.outfield_seconds),
                fmt_mmss(summary.goalie_seconds),
                summary.points.goalie,
                summary.points.defender,
                summary.points.midfielder,
                summary.points.attacker,
                summary.role_percentages.get(Role.DEFENDER.value, 0.0),
                summary.role_percentages.get(Role.MIDFIELDER.value, 0.0),
                summary.role_percentages.get(Role.ATTACKER.value, 0.0),
                summary.delta_seconds,
                summary.fairness,
            ])
        csv_text = buffer.getvalue()
        buffer.close()
        return csv_text


class RoleAnalyticsService:
    """
    Build role reports describing how outfield time was shared.
    """

    def __init__(self, exporter: Optional[RoleReportExporter] = None) -> None:
        self.exporter = exporter or RoleReportExporter()

    def build_role_report(self, players: Iterable[Player]) -> RoleReport:
        """Build a :class:`RoleReport` for the given squad."""
        roster: List[Player] = list(players)
        totals = [int(p.stats.time_on_field_seconds or 0) for p in roster]
        average_seconds = statistics.mean(totals) if totals else 0.0

        summaries = []
        for player, outfield_seconds in zip(roster, totals):
            delta = int(round(outfield_seconds - average_seconds))
            summaries.append(PlayerRoleSummary(
                player_id=player.id,
                display_name=player.display_name,
                is_inactive=player.is_inactive,
                outfield_seconds=outfield_seconds,
                goalie_seconds=int(player.stats.time_as_goalie_seconds or 0),
                points=calculate_role_points(player.stats),
                role_percentages=self._role_percentages(player.stats),
                delta_seconds=delta,
                fairness=self._classify_fairness(delta),
            ))

        summaries.sort(key=lambda item: (
            FAIRNESS_ORDER.get(item.fairness, 1),
            item.delta_seconds,
            item.display_name or item.player_id,
        ))
        fairness_counter = Counter(summary.fairness for summary in summaries)

        return RoleReport(
            squad_size=len(roster),
            players=summaries,
            average_seconds=average_seconds,
            min_seconds=min(totals) if totals else 0,
            max_seconds=max(totals) if totals else 0,
            fairness_counts={label: fairness_counter.get(label, 0) for label in FAIRNESS_ORDER},
        )

    def generate_report_csv(self, players: Iterable[Player]) -> str:
        """Build a report for ``players`` and export it as CSV."""
        return self.exporter.export_to_csv(self.build_role_report(players))

    @staticmethod
    def _role_percentages(stats: PlayerStats) -> dict:
        total = stats.outfield_role_seconds()
        if total <= 0:
            return {role.value: 0.0 for role in OUTFIELD_ROLES}
        return {
            role.value: round(stats.role_seconds(role) * 100 / total, 1)
            for role in OUTFIELD_ROLES
        }

    @staticmethod
    def _classify_fairness(delta_seconds: int) -> str:
        if delta_seconds <= -FAIRNESS_THRESHOLD_SECONDS:
            return "under"
        if delta_seconds >= FAIRNESS_THRESHOLD_SECONDS:
            return "over"
        return "ok"
