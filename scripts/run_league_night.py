"""
Command-line entry point for running a league night.
Loads the roster, builds teams and a schedule, and optionally publishes.
"""

import sys
import argparse
import random
from datetime import datetime
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.logging_config import setup_logging
from app.models import FormatSelection, GameFormat, GameVariant, BalanceStrategy
from app.services.league_night import LeagueNight, build_league_night
from app.services.roster_io import parse_roster_csv
from app.services.schedule_generator import format_description
from app.services.stores import InMemoryPlayerStore, InMemorySnapshotStore
from app.services.team_balancer import summarize_team


def main():
    """
    Run one night: roster, teams, schedule, publish.
    """
    parser = argparse.ArgumentParser(
        description='League Night Operations - Generate balanced teams and match schedules'
    )
    parser.add_argument('--team-size', type=int, default=4, help='Players per team (default: 4)')
    parser.add_argument(
        '--format',
        choices=[f.value for f in GameFormat],
        default=GameFormat.ROUND_ROBIN.value,
        help='Game format'
    )
    parser.add_argument(
        '--variant',
        choices=[v.value for v in GameVariant],
        default=GameVariant.STANDARD.value,
        help='King-of-the-Court variant'
    )
    parser.add_argument(
        '--strategy',
        choices=[s.value for s in BalanceStrategy],
        default=None,
        help='Team balancing strategy (defaults to BALANCE_STRATEGY)'
    )
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible output')
    parser.add_argument(
        '--roster-csv',
        default=None,
        help='Run against a CSV roster (everyone checked in) instead of the configured store'
    )
    parser.add_argument('--publish', action='store_true', help='Publish the result to the public view')

    args = parser.parse_args()
    setup_logging()

    print("\n" + "=" * 80)
    print("LEAGUE NIGHT")
    print("=" * 80)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 80)

    if args.roster_csv:
        with open(args.roster_csv, encoding="utf-8") as f:
            parsed = parse_roster_csv(f.read())
        if not parsed.success:
            print(f"ERROR: {parsed.error}")
            return 1
        night = LeagueNight(InMemoryPlayerStore(), InMemorySnapshotStore(), rng=random.Random(args.seed))
        night.pool.import_players(night.player_store, parsed.data["records"])
        for player in night.pool.players:
            night.pool.toggle_presence(night.player_store, player.id)
    else:
        night = build_league_night()
        if args.seed is not None:
            night.rng.seed(args.seed)
        loaded = night.load()
        if not loaded.success:
            print(f"ERROR: {loaded.error}")
            return 1

    counts = night.pool.counts()
    print(f"\n[STEP 1] Roster: {counts['total']} players, {counts['present']} present "
          f"({counts['guys']} guys, {counts['gals']} gals)")

    selection = FormatSelection(GameFormat(args.format), GameVariant(args.variant))
    night.set_format(selection)
    print(f"\n[STEP 2] Format: {format_description(night.selection)}")
    if night.active_rule:
        print(f"  Active rule: {night.active_rule.name} - {night.active_rule.description}")

    if selection.format != GameFormat.BLIND_DRAW:
        strategy = BalanceStrategy(args.strategy) if args.strategy else None
        teams = night.generate_teams(args.team_size, strategy)
        if not teams.success:
            print(f"ERROR: {teams.error}")
            return 1

        print(f"\n[STEP 3] Generated {len(night.teams)} teams")
        for team in night.teams:
            summary = summarize_team(team)
            print(f"  {team.name}: {summary.size} players, avg skill {summary.avg_skill}, "
                  f"{summary.guy_count} guys / {summary.gal_count} gals")
            for player in sorted(team.players, key=lambda p: p.name):
                print(f"    - {player.name} ({player.gender.value}, {player.skill})")

    schedule = night.generate_schedule(args.team_size)
    if not schedule.success:
        print(f"ERROR: {schedule.error}")
        return 1

    print(f"\n[STEP 4] Generated {len(schedule.data)} matches")
    for match in schedule.data:
        print(f"  {match.court:<18} {match.team_a} vs {match.team_b}")

    if args.publish:
        published = night.publish()
        if not published.success:
            print(f"ERROR: {published.error}")
            return 1
        print("\n[STEP 5] Published to the public view")

    print("\n" + "=" * 80)
    print(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 80)
    return 0


if __name__ == '__main__':
    sys.exit(main())
