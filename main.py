import pygame
import os
import argparse
import numpy as np
from machine_seed.core.config_manager import ConfigManager
from machine_seed.core.simulation import Simulation
from machine_seed.core.time_manager import TimeManager
from machine_seed.components.data_components import BotComponent, PositionComponent, PathComponent
from machine_seed.world.grid import Grid
from machine_seed.world.map_gen import generate_map
from machine_seed.world.spawn import spawn_initial_bots
from machine_seed.utils.logger import Logger

def log_status(sim: Simulation, bots):
    Logger.info(f"[Headless] Tick: {sim.time_manager.total_ticks} | Zones: {sim.zones.zone_count} "
                f"| Scrap delivered: {sim.resources.scrap}")

    for i, bot_id in enumerate(bots):
        bot = sim.entity_manager.get_component(bot_id, BotComponent)
        pos = sim.entity_manager.get_component(bot_id, PositionComponent)
        path = sim.entity_manager.get_component(bot_id, PathComponent)
        path_str = f"{len(path.remaining())} steps" if path else "None"
        Logger.info(f"[Bot {i+1}] Pos:({pos.x},{pos.y}) | State:{bot.state.value} | "
                    f"Carried:{bot.carried} | Job:{bot.job} | Path:{path_str}")

    per_zone = {zone_id: sim.job_system.available_count(zone_id) for zone_id in range(sim.zones.zone_count)}
    per_zone = {z: n for z, n in per_zone.items() if n}
    Logger.info(f"[JobSystem] Available jobs: {sim.job_system.available_count()} | Per zone: {per_zone}")

def main():
    # 0. Parse Arguments
    parser = argparse.ArgumentParser(description="Machine Seed bot colony")
    parser.add_argument("--headless", action="store_true", help="Run in headless mode (no window)")
    parser.add_argument("--config", default="config/balance.json", help="Path to balance config")
    parser.add_argument("--ticks", type=int, default=0, help="Stop after this many ticks (0 = run until quit)")
    parser.add_argument("--seed", type=int, default=None, help="Map seed, overrides world.seed")
    parser.add_argument("--fast", action="store_true", help="Do not throttle to tick_rate")
    args = parser.parse_args()

    # 1. Initialization
    if args.headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"

    pygame.init()

    config_manager = ConfigManager(args.config)
    Logger.configure_debug(config_manager.get("debug", {}))
    global_conf = config_manager.get("global", {})
    world_conf = config_manager.get("world", {})
    tick_rate = global_conf.get("tick_rate", 20)

    if not args.headless:
        pygame.display.set_mode((320, 80))
        pygame.display.set_caption(global_conf.get("title", "Machine Seed"))

    time_manager = TimeManager(tick_rate=tick_rate)
    Logger.set_time_manager(time_manager)

    # 2. World Generation
    grid = Grid(world_conf.get("width", 64), world_conf.get("height", 64), world_conf.get("chunk_size", 16))
    seed = args.seed if args.seed is not None else world_conf.get("seed", 0)
    generate_map(grid, np.random.default_rng(seed),
                 scrap_density=world_conf.get("scrap_density", 0.04),
                 wall_count=world_conf.get("wall_count", 10))

    sim = Simulation(grid, config_manager, time_manager)

    # 3. Spawn Entities
    home_x, home_y = grid.width // 2, grid.height // 2
    sim.spawn_home_base(home_x, home_y)
    bots = spawn_initial_bots(sim.entity_manager, grid, home_x, home_y,
                              count=config_manager.get("bots.initial_count", 2),
                              speed=config_manager.get("bots.move_speed", 1.0))
    sim.initialize()

    Logger.info("=== Initial Map Setup Complete ===")
    Logger.info(f"Map Size: {grid.width}x{grid.height} | Bots: {len(bots)} | Zones: {sim.zones.zone_count} "
                f"| Jobs: {sim.job_system.available_count()}")
    Logger.info("Game Loop Started")

    # 4. Game Loop
    running = True
    clock = pygame.time.Clock()

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        sim.tick()

        if time_manager.total_ticks % tick_rate == 0:
            log_status(sim, bots)

        if args.ticks and time_manager.total_ticks >= args.ticks:
            Logger.info(f"Simulation completed: {time_manager.total_ticks} ticks, {sim.resources.scrap} scrap delivered")
            break

        if not args.fast:
            clock.tick(tick_rate)

    config_manager.stop()
    pygame.quit()
    Logger.info("Game Terminated")

if __name__ == "__main__":
    main()
