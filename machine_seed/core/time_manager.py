class TimeManager:
    """
    Fixed-step simulation clock.

    The simulation advances in whole ticks of `fixed_dt` game seconds.
    Time scale stretches the step, pause makes it zero; the tick counter
    keeps running either way so log lines stay ordered.
    """
    def __init__(self, tick_rate: int = 60, fixed_dt: float = 1.0):
        self.tick_rate = tick_rate
        self.fixed_dt = fixed_dt

        self.delta_time = 0.0
        self.time_scale = 1.0
        self.is_paused = False

        self.elapsed_time = 0.0 # Game world time (scaled)
        self.total_ticks = 0 # Total ticks since start

    def update(self) -> float:
        """Advances one tick and returns the scaled delta for it."""
        if not self.is_paused:
            self.delta_time = self.fixed_dt * self.time_scale
            self.elapsed_time += self.delta_time
        else:
            self.delta_time = 0.0

        self.total_ticks += 1
        return self.delta_time

    def set_time_scale(self, scale: float):
        self.time_scale = max(0.0, scale)

    def toggle_pause(self):
        self.is_paused = not self.is_paused
