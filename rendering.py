import pygame

from constants import (
    LEVEL_CAPACITIES,
    NEUTRON_CREATOR_POSITION,
    PARTICLE_RADIUS,
    PROTON_CREATOR_POSITION,
)
from nuclide_chart import CellClassification
from nuclide_data import format_time_value_with_unit, element_symbol, nearest_timescale_point
from particles import DECAY_PROPERTIES, DecayType, NUCLEON_TYPES, ParticleType, decay_symbol

BACKGROUND = (0, 0, 0)
TEXT_COLOR = (255, 255, 255)
DIM_TEXT_COLOR = (110, 110, 110)
LEVEL_LINE_COLOR = (90, 90, 90)
WARNING_COLOR = (255, 120, 80)

DECAY_KEYS = {
    DecayType.ALPHA_DECAY: "A",
    DecayType.BETA_MINUS_DECAY: "B",
    DecayType.BETA_PLUS_DECAY: "V",
    DecayType.PROTON_EMISSION: "P",
    DecayType.NEUTRON_EMISSION: "N",
}


class Renderer:
    def __init__(self, screen):
        self.screen = screen
        self.width = screen.get_width()
        self.height = screen.get_height()
        self.simulation_width = min(800, self.width - 400)  # Adjust simulation area
        self.simulation_height = self.height
        self.font = pygame.font.SysFont('Arial', 16)
        self.small_font = pygame.font.SysFont('Arial', 14)
        self.large_font = pygame.font.SysFont('Arial', 24)
        self.cache = {}
        self.info_panel_scroll = 0  # Scrolling offset for info panel

    def resize(self, width, height):
        """Update renderer dimensions after window resize"""
        self.width = width
        self.height = height
        self.simulation_width = min(800, width - 400)  # Reserve space for info panel
        self.simulation_height = height
        # Clear text cache on resize
        self.cache = {}

    def render(self, model, chart, fps):
        self.screen.fill(BACKGROUND)
        self.draw_energy_levels(model)
        self.draw_creators(model)

        # Draw from the bottom of the view up so higher levels overlap lower ones
        for nucleon in sorted(model.nucleons(), key=lambda p: -p.y):
            self.draw_particle(nucleon)
        for particle in model.emitted_particles():
            if particle.type == ParticleType.ALPHA:
                for constituent in particle.constituents:
                    self.draw_particle(constituent)
            else:
                self.draw_particle(particle)

        self.draw_label(model)
        self.draw_info_panel(model, chart, fps)
        pygame.display.flip()

    def draw_particle(self, particle):
        x, y = particle.x, particle.y
        if not (0 <= x < self.simulation_width and 0 <= y < self.simulation_height):
            return

        radius = max(1, int(particle.radius))
        color = particle.get_color()
        pygame.draw.circle(self.screen, color, (int(x), int(y)), radius)

        if particle.type == ParticleType.PROTON and radius > 3:
            highlight_radius = max(1, int(radius * 0.3))
            highlight_offset = max(1, int(radius * 0.2))
            pygame.draw.circle(self.screen, (255, 150, 150),
                               (int(x - highlight_offset), int(y - highlight_offset)),
                               highlight_radius)
        elif particle.type == ParticleType.NEUTRON and radius > 2:
            pygame.draw.circle(self.screen, (150, 150, 200), (int(x), int(y)), radius - 1, 1)

        # Nucleons bound in a compacted level cannot be dragged
        if getattr(particle, "input_enabled", True) is False:
            pygame.draw.circle(self.screen, (60, 60, 60), (int(x), int(y)), radius, 1)

    def draw_energy_levels(self, model):
        """One line under each level of each species, spanning its slot columns."""
        shells = model.shells
        for species in NUCLEON_TYPES:
            for level, capacity in enumerate(LEVEL_CAPACITIES):
                left = shells.slot_position(species, level, 0)
                right = shells.slot_position(species, level, capacity - 1)
                y = left[1] + PARTICLE_RADIUS + 4
                pygame.draw.line(self.screen, LEVEL_LINE_COLOR,
                                 (left[0] - PARTICLE_RADIUS, y),
                                 (right[0] + PARTICLE_RADIUS, y), 2)

    def draw_creators(self, model):
        for species, position in ((ParticleType.PROTON, PROTON_CREATOR_POSITION),
                                  (ParticleType.NEUTRON, NEUTRON_CREATOR_POSITION)):
            counts = model.counts(species)
            text = self.get_text(
                f"creator_{species.name}",
                f"{species.name.title()}s: {counts.effective}",
                TEXT_COLOR,
            )
            self.screen.blit(text, (position[0] - text.get_width() / 2, position[1] + 20))

    def draw_label(self, model):
        label = model.nuclide_label()
        if not label:
            return
        color = TEXT_COLOR if model.state.exists or model.state.protons == 0 else WARNING_COLOR
        text = self.large_font.render(label, True, color)
        self.screen.blit(text, (self.simulation_width / 2 - text.get_width() / 2, 30))

    def get_text(self, key, text, color):
        cache_key = f"{key}_{text}_{color}"
        if cache_key not in self.cache:
            self.cache[cache_key] = self.font.render(text, True, color)
        return self.cache[cache_key]

    def draw_info_panel(self, model, chart, fps):
        x = self.simulation_width + 20
        y = 20 - self.info_panel_scroll  # Apply scroll offset
        line_height = 25

        def add_item(key, text, color=TEXT_COLOR):
            nonlocal y
            if y > -line_height:
                self.screen.blit(self.get_text(key, text, color), (x, y))
            y += line_height

        state = model.state
        add_item("title", "Build a Nucleus")
        add_item("fps", f"FPS: {fps:.0f}", DIM_TEXT_COLOR)
        y += 10

        add_item("protons", f"Protons: {state.protons}")
        add_item("neutrons", f"Neutrons: {state.neutrons}")
        add_item("mass", f"Mass number: {state.mass_number}")
        if state.mass_number:
            if not state.exists:
                stability = "does not form"
            else:
                stability = "stable" if state.is_stable else "unstable"
            add_item("stability", f"Status: {stability}")
            add_item("half_life", f"Half-life: {format_time_value_with_unit(state.half_life)}")
            point = nearest_timescale_point(state.half_life)
            if point:
                add_item("timescale", f"  about {point[0]}", DIM_TEXT_COLOR)
        y += 10

        add_item("controls_title", "Nucleons:")
        controls = [
            ("1", "add proton", model.can_increment(ParticleType.PROTON)),
            ("2", "remove proton", model.can_decrement(ParticleType.PROTON)),
            ("3", "add neutron", model.can_increment(ParticleType.NEUTRON)),
            ("4", "remove neutron", model.can_decrement(ParticleType.NEUTRON)),
            ("5", "add both", model.can_increment_both()),
            ("6", "remove both", model.can_decrement_both()),
        ]
        for key, text, enabled in controls:
            add_item(f"control_{key}", f"  [{key}] {text}", TEXT_COLOR if enabled else DIM_TEXT_COLOR)
        y += 10

        add_item("decays_title", "Decays:")
        for decay_type, key in DECAY_KEYS.items():
            enabled = model.is_decay_available(decay_type)
            label = DECAY_PROPERTIES[decay_type].label
            add_item(f"decay_{key}", f"  [{key}] {label} ({decay_symbol(decay_type)})",
                     TEXT_COLOR if enabled else DIM_TEXT_COLOR)
        undo_color = TEXT_COLOR if model.can_undo_decay() else DIM_TEXT_COLOR
        add_item("undo", "  [U] undo decay", undo_color)
        y += 10

        equation = model.decay_equation()
        if equation.decay_type is not None:
            add_item(
                "equation",
                f"{element_symbol(equation.initial_protons)}-{equation.initial_mass} → "
                f"{element_symbol(equation.final_protons) or 'n'}-{equation.final_mass} "
                f"+ {decay_symbol(equation.decay_type)}",
            )
        y += 10

        self.draw_chart(chart, state, x, y)

    def draw_chart(self, chart, state, x, y, cell_size=22):
        """Zoomed-in nuclide chart around the current nuclide, protons upwards."""
        rows = chart.cells_around(state.protons, state.neutrons, radius=2)
        for row_index, row in enumerate(rows):
            for col_index, cell in enumerate(row):
                rect = pygame.Rect(
                    x + col_index * cell_size,
                    y + (len(rows) - 1 - row_index) * cell_size,
                    cell_size - 2,
                    cell_size - 2,
                )
                if cell.classification != CellClassification.DOES_NOT_EXIST:
                    pygame.draw.rect(self.screen, cell.color, rect)
                if (cell.proton_number, cell.neutron_number) == (state.protons, state.neutrons):
                    pygame.draw.rect(self.screen, TEXT_COLOR, rect, 2)

    def handle_scroll(self, amount):
        self.info_panel_scroll = max(0, self.info_panel_scroll + amount)
