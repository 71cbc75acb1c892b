"""
scripts/recommend.py
────────────────────────────────────────────────────────────────────────
Pick today's menu from the command line.

    # one recommendation for two people at lunch
    python -m scripts.recommend --meal-time lunch --people 2

    # stricter request, custom store
    python -m scripts.recommend --meal-time dinner --spice hot \\
        --budget low --avoid "pork, shrimp" --db sqlite+aiosqlite:///./me.db

    # inspect without spending an attempt
    python -m scripts.recommend --meal-time dinner --pool
    python -m scripts.recommend --history
    python -m scripts.recommend --stats
"""
from __future__ import annotations

import argparse
import asyncio
import logging

from config import settings
from core.catalog import load_default_catalog
from core.models import (
    BudgetLevel,
    DietType,
    MealTime,
    RecommendRequest,
    SpiceLevel,
    parse_avoid_ingredients,
)
from services.session import MenuSession
from services.store import SqlStore


def _choices(enum: type) -> list[str]:
    return [e.value for e in enum]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="daily menu recommendation")
    ap.add_argument("--meal-time", choices=_choices(MealTime), default=MealTime.lunch.value)
    ap.add_argument("--people", type=int, default=2)
    ap.add_argument("--spice", choices=_choices(SpiceLevel), default=SpiceLevel.normal.value)
    ap.add_argument("--budget", choices=_choices(BudgetLevel), default=BudgetLevel.normal.value)
    ap.add_argument("--diet", choices=_choices(DietType), default=DietType.any.value)
    ap.add_argument("--max-minutes", type=int, default=30)
    ap.add_argument("--avoid", default="", help="comma separated ingredients to avoid")
    ap.add_argument("--cuisine", default=None, help="only this cuisine (relaxable)")
    ap.add_argument("--db", default=settings.database_url, help="async SQLAlchemy URL")
    ap.add_argument("--catalog", default=settings.catalog_path, help="menu catalog JSON")

    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("--reset", action="store_true", help="reset today's attempts")
    mode.add_argument("--pool", action="store_true", help="show candidate counts per stage")
    mode.add_argument("--history", action="store_true", help="list past picks")
    mode.add_argument("--stats", action="store_true", help="summarise past picks")
    mode.add_argument("--favorite", metavar="MENU_ID", help="toggle a favorite")
    return ap


def build_request(args: argparse.Namespace) -> RecommendRequest:
    return RecommendRequest(
        meal_time=args.meal_time,
        people=args.people,
        spice=args.spice,
        budget=args.budget,
        diet_type=args.diet,
        cooking_minutes_max=args.max_minutes,
        avoid_ingredients=parse_avoid_ingredients(args.avoid),
        cuisine=args.cuisine,
    )


async def _run(args: argparse.Namespace) -> int:
    store = SqlStore(args.db)
    session = MenuSession(load_default_catalog(args.catalog), store)
    request = build_request(args)
    try:
        if args.reset:
            state = await session.reset(request)
            print(f"✓ reset – {state.max_attempts} attempts available for {state.date_key}")
        elif args.pool:
            info = await session.pool_info(request)
            for s in info.stages:
                marker = "→" if s.key == info.active_stage else " "
                print(f"{marker} {s.key:<18} total={s.total:<3} fresh={s.fresh:<3} "
                      f"not-recent={s.fresh_not_recent}")
        elif args.history:
            for h in await session.history():
                print(f"{h.date_key}  #{h.attempt}  {h.meal_time.value:<10} "
                      f"{h.people}p  {h.menu_name}  ({h.score:.0f})")
        elif args.stats:
            ov = await session.overview()
            print(f"picks: {ov.total_count}  avg people: {ov.avg_people:.1f}  "
                  f"avg score: {ov.avg_score:.1f}")
            print("cuisines:   " + ", ".join(f"{c.label} ×{c.count}" for c in ov.top_cuisine))
            print("meal times: " + ", ".join(f"{c.label} ×{c.count}" for c in ov.top_meal_time))
        elif args.favorite:
            favs = await session.toggle_favorite(args.favorite)
            print(f"✓ favorites: {', '.join(favs) or '(none)'}")
        else:
            outcome = await session.recommend(request)
            print(outcome.explanation)
            rec = outcome.recommendation
            if rec is None:
                return 1
            print(f"★ {rec.picked.name} ({rec.picked.cuisine}) – score {rec.score:.0f}, "
                  f"attempt {rec.attempt}/{outcome.state.max_attempts}")
            for reason in rec.reasons:
                print(f"  · {reason}")
            if rec.alternatives:
                print("  also: " + ", ".join(m.name for m in rec.alternatives))
    finally:
        await store.close()
    return 0


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
