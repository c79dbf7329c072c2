from collections import deque
import logging

import pygame

from config import SimulationConfig
from nucleus_model import NucleusSimulationModel
from nuclide_chart import NuclideChart
from particles import DecayType, ParticleType
from rendering import Renderer

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("NuclearSim")

DECAY_KEYS = {
    pygame.K_a: DecayType.ALPHA_DECAY,
    pygame.K_b: DecayType.BETA_MINUS_DECAY,
    pygame.K_v: DecayType.BETA_PLUS_DECAY,
    pygame.K_p: DecayType.PROTON_EMISSION,
    pygame.K_n: DecayType.NEUTRON_EMISSION,
}


class NuclearSimulation:
    def __init__(self, config=None):
        pygame.init()
        # Make the window resizable
        self.screen = pygame.display.set_mode((1200, 800), pygame.RESIZABLE)
        pygame.display.set_caption("Build a Nucleus")
        self.clock = pygame.time.Clock()
        self.running = True

        # Production runs never crash on a rejected action, they log it
        config = config if config is not None else SimulationConfig(strict_contracts=False)
        self.model = NucleusSimulationModel(config)
        self.chart = NuclideChart(self.model.data_table)
        self.renderer = Renderer(self.screen)

        self.held_nucleon_id = None
        self.fps_history = deque(maxlen=30)
        self.model.add_listener(self.on_state_change)

    def on_state_change(self, changes):
        if "exists" in changes or "protons" in changes or "neutrons" in changes:
            logger.info(f"Nucleus: {self.model.nuclide_label() or 'empty'}")

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self.handle_keypress(event.key)
            elif event.type == pygame.VIDEORESIZE:
                self.handle_resize(event.size)
            elif event.type == pygame.MOUSEWHEEL:
                mouse_x, _ = pygame.mouse.get_pos()
                if mouse_x > self.renderer.simulation_width:
                    self.renderer.handle_scroll(-event.y * 30)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.begin_drag(event.pos)
            elif event.type == pygame.MOUSEMOTION and self.held_nucleon_id is not None:
                self.model.drag_user_held(self.held_nucleon_id, event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.end_drag(event.pos)

    def handle_resize(self, size):
        """Handle window resize event"""
        width, height = size
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.renderer.resize(width, height)

    def begin_drag(self, position):
        """Pick up the nucleon under the cursor, if any."""
        nucleon = self.model.nucleon_at(position)
        if nucleon is not None and self.model.begin_user_hold(nucleon.id) is not None:
            self.held_nucleon_id = nucleon.id

    def end_drag(self, position):
        if self.held_nucleon_id is None:
            return
        self.model.end_user_hold(self.held_nucleon_id, position)
        self.held_nucleon_id = None

    def handle_keypress(self, key):
        model = self.model
        if key == pygame.K_ESCAPE:
            self.running = False

        # Nucleon buttons; each is ignored while the view would show it disabled
        elif key == pygame.K_1 and model.can_increment(ParticleType.PROTON):
            model.request_increment(ParticleType.PROTON)
        elif key == pygame.K_2 and model.can_decrement(ParticleType.PROTON):
            model.request_decrement(ParticleType.PROTON)
        elif key == pygame.K_3 and model.can_increment(ParticleType.NEUTRON):
            model.request_increment(ParticleType.NEUTRON)
        elif key == pygame.K_4 and model.can_decrement(ParticleType.NEUTRON):
            model.request_decrement(ParticleType.NEUTRON)
        elif key == pygame.K_5 and model.can_increment_both():
            model.request_increment_both()
        elif key == pygame.K_6 and model.can_decrement_both():
            model.request_decrement_both()

        elif key in DECAY_KEYS:
            decay_type = DECAY_KEYS[key]
            if model.is_decay_available(decay_type):
                model.request_decay(decay_type)
            else:
                logger.info(f"{decay_type.name.replace('_', ' ').title()} is not available")
        elif key == pygame.K_u:
            if model.undo_decay():
                logger.info("Decay undone")
        elif key == pygame.K_r:
            model.reset()
            self.chart.clear()
            logger.info("Nucleus reset")

    def run(self):
        logger.info("Starting simulation")
        try:
            while self.running:
                dt = min(self.clock.tick(60) / 1000.0, 0.1)
                self.fps_history.append(1.0 / dt if dt > 0 else 60)
                fps = sum(self.fps_history) / len(self.fps_history)

                self.handle_events()
                self.model.step(dt)
                self.renderer.render(self.model, self.chart, fps)
        except Exception as e:
            logger.exception(f"Simulation error: {e}")
            raise
        finally:
            self.chart.clear()
            pygame.quit()
            logger.info("Simulation ended")


if __name__ == "__main__":
    simulation = NuclearSimulation()
    simulation.run()
