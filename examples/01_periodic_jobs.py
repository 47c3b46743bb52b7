#!/usr/bin/env python3
"""Periodic Jobs — registering, retiming, removing and stopping jobs.

WHY A SOONEST-DEADLINE LOOP
───────────────────────────
A small interactive program (a terminal game, a dashboard, a device poller)
usually has a handful of things that must happen at different rates:
redraw every 33 ms, read input every 150 ms, move the player every 200 ms.
The scheduler keeps one countdown per job, always runs the job that is due
soonest, and charges the time spent waiting and running to every countdown.

ARCHITECTURE
────────────
    Scheduler
    │
    ├─▶ JobRegistry     ─ jobs addressed by JobHandle
    └─▶ TimeSource      ─ ManualTimeSource here, so the example runs instantly

    Each iteration:
      select least time_remaining → sleep → run action → advance all → reset

BEST PRACTICES
──────────────
• An action may only retime or remove its OWN job (scheduler.current_job).
• Change a job's speed with update_job_interval, never by sleeping inside it.
• Call stop() from any action; the loop exits once that action returns.

Run: python examples/01_periodic_jobs.py
"""

from cadence.core.logging import configure_logging
from cadence.core.scheduling import ManualTimeSource, Scheduler


def main():
    print("=" * 60)
    print("Scheduling — Periodic Jobs")
    print("=" * 60)

    configure_logging(level="WARNING", json_format=False)
    clock = ManualTimeSource()
    scheduler = Scheduler(clock)
    frames = []
    moves = []

    # --- 1. Register jobs --------------------------------------------------
    print("\n[1] Register draw (33 ms), move (200 ms), bonus (120 ms)")

    def draw():
        frames.append(clock.now_ms())
        clock.advance(2)  # pretend drawing takes 2 ms

    def move():
        moves.append(clock.now_ms())
        # After three moves the worm turns vertical and slows down.
        if len(moves) == 3:
            scheduler.update_job_interval(scheduler.current_job, 300)
            print(f"  t={clock.now_ms()}ms  move: slowing to 300 ms")

    def bonus():
        print(f"  t={clock.now_ms()}ms  bonus: collected, removing itself")
        scheduler.remove_job(scheduler.current_job)

    def game_over():
        print(f"  t={clock.now_ms()}ms  game over: stopping")
        scheduler.stop()

    scheduler.add_job(draw, 33)
    scheduler.add_job(move, 200)
    scheduler.add_job(bonus, 120)
    scheduler.add_job(game_over, 1500)

    for row in scheduler.registry.snapshot():
        print(f"  {row['name']:<10} interval={row['interval']:>5} ms")

    # --- 2. Run ------------------------------------------------------------
    print("\n[2] Run until game_over stops the scheduler")
    scheduler.run()

    # --- 3. Inspect --------------------------------------------------------
    print("\n[3] Results")
    print(f"  frames drawn : {len(frames)}")
    print(f"  moves at     : {moves}")
    print(f"  jobs left    : {[row['name'] for row in scheduler.registry.snapshot()]}")
    print(f"  health       : {scheduler.health().to_dict()['stats']['runs_by_job']}")


if __name__ == "__main__":
    main()
