"""Tests for card counts and belief estimation."""

import numpy as np
import pytest

from hanabi_canonical.config import EncoderConfig, GameConfig
from hanabi_canonical.encoding import (
    CanonicalObservationEncoder,
    card_knowledge_section,
    compute_card_count,
    extract_belief,
    full_deck_count,
    v0_belief,
    v1_belief,
    v1_belief_steps,
)
from hanabi_canonical.engine import Card
from hanabi_canonical.errors import EncodingInvariantError


@pytest.fixture
def tiny_config():
    """One color, two ranks with a single copy each, one card per hand."""
    return GameConfig(num_colors=1, num_ranks=2, hand_size=1, card_instances=((1, 1),))


@pytest.fixture
def tiny_observation(tiny_config, observation_factory):
    """Observer was told its card is the low rank; partner holds the high one."""
    obs = observation_factory(tiny_config, hands=[[Card(0, 0)], [Card(0, 1)]])
    obs.hands[0].knowledge[0].apply_is_rank_hint(0)
    return obs


@pytest.fixture
def hinted_observation(config, observation_factory):
    """Standard game after a few positive and negative hints."""
    obs = observation_factory(config, discard_pile=[Card(1, 0)], fireworks=[1, 0, 0, 0, 0])
    own = obs.hands[0].knowledge
    own[0].apply_is_color_hint(0)
    own[1].apply_is_rank_hint(0)
    for knowledge in own[2:]:
        knowledge.apply_is_not_color_hint(0)
        knowledge.apply_is_not_rank_hint(0)
    obs.hands[1].knowledge[0].apply_is_color_hint(1)
    obs.hands[1].knowledge[1].apply_is_not_rank_hint(4)
    return obs


def slot_grids(config, section):
    """(players, hand_size, colors * ranks) grids of a knowledge section."""
    return extract_belief(config, section).reshape(config.num_players, config.hand_size, -1)


class TestCardCount:
    """Test unseen card counts."""

    def test_fresh_game(self, config, fresh_observation):
        """Test nothing is accounted for at the start."""
        count = compute_card_count(config, fresh_observation)
        np.testing.assert_array_equal(count, full_deck_count(config))
        assert count.sum() == 50

    def test_discards_and_fireworks(self, config, observation_factory):
        """Test discarded and played cards are removed."""
        obs = observation_factory(config, discard_pile=[Card(0, 0)], fireworks=[2, 0, 0, 0, 0])
        count = compute_card_count(config, obs)
        assert count[:5].tolist() == [1, 1, 2, 2, 1]
        assert count.sum() == obs.deck_size + obs.total_cards_in_hands()

    def test_inconsistent_deck_size(self, config, observation_factory):
        """Test the total must match the deck and hands."""
        obs = observation_factory(config, deck_size=39)
        with pytest.raises(EncodingInvariantError):
            compute_card_count(config, obs)

    def test_negative_count(self, config, observation_factory):
        """Test more discards than copies are rejected."""
        obs = observation_factory(config, discard_pile=[Card(0, 0)] * 4)
        with pytest.raises(EncodingInvariantError):
            compute_card_count(config, obs)

    @pytest.mark.parametrize("fireworks", [[6, 0, 0, 0, 0], [-1, 0, 0, 0, 0], [0, 0, 0, 0]])
    def test_bad_fireworks(self, config, observation_factory, fireworks):
        """Test firework levels outside a color row are rejected before counting."""
        obs = observation_factory(config, fireworks=fireworks)
        with pytest.raises(EncodingInvariantError):
            compute_card_count(config, obs)
        with pytest.raises(EncodingInvariantError):
            CanonicalObservationEncoder(config).encode_card_count(obs)


class TestDirectBelief:
    """Test the V0 belief."""

    def test_unhinted_slot_follows_counts(self, config, fresh_observation):
        """Test an unhinted slot is proportional to the unseen copies."""
        belief = CanonicalObservationEncoder(config).encode_v0_belief(fresh_observation)
        assert belief.shape == (250,)
        np.testing.assert_allclose(belief[:25], full_deck_count(config) / 50, rtol=1e-6)

    def test_exhausted_card_gets_zero(self, config, observation_factory):
        """Test plausible cards with no unseen copies get no mass."""
        obs = observation_factory(config, discard_pile=[Card(2, 1), Card(2, 1)])
        obs.hands[0].knowledge[0].apply_is_color_hint(2)

        grids = slot_grids(config, v0_belief(config, obs))

        np.testing.assert_allclose(grids[0, 0, 10:15], [3 / 8, 0, 2 / 8, 2 / 8, 1 / 8])
        assert grids[0, 0, :10].sum() == 0
        assert grids[0, 0, 15:].sum() == 0

    def test_hint_entries_untouched(self, config, fresh_observation):
        """Test the hinted color and rank entries pass through."""
        fresh_observation.hands[1].knowledge[2].apply_is_rank_hint(3)
        knowledge = card_knowledge_section(config, fresh_observation)
        belief = v0_belief(config, fresh_observation, knowledge)

        slots = belief.reshape(2, 5, 35)
        np.testing.assert_array_equal(slots[..., 25:], knowledge.reshape(2, 5, 35)[..., 25:])
        assert knowledge.reshape(2, 5, 35)[1, 2, :25].sum() == 5

    def test_no_plausible_unseen_card(self, config, observation_factory):
        """Test a slot whose only plausible card is gone aborts."""
        obs = observation_factory(config, discard_pile=[Card(4, 4)])
        obs.hands[0].knowledge[0].apply_is_color_hint(4)
        obs.hands[0].knowledge[0].apply_is_rank_hint(4)
        with pytest.raises(EncodingInvariantError):
            v0_belief(config, obs)

    def test_empty_slot_stays_zero(self, config, observation_factory):
        """Test slots past a short hand stay zero."""
        deck = [
            Card(color, rank)
            for color in range(config.num_colors)
            for rank in range(config.num_ranks)
            for _ in range(config.instances_of(color, rank))
        ]
        # Six cards left unseen: R1 x3, R2 x2, R3
        obs = observation_factory(
            config,
            hands=[[Card(0, 0)] * 4, [Card(0, 1)] * 2],
            discard_pile=deck[6:],
            deck_size=0,
        )

        grids = slot_grids(config, v0_belief(config, obs))

        assert grids[0, 4].sum() == 0
        assert grids[1, 2:].sum() == 0
        np.testing.assert_allclose(grids[0, :4].sum(axis=-1), 1.0)


class TestRefinedBelief:
    """Test the V1 belief."""

    def test_tiny_game_closed_form(self, tiny_config, tiny_observation):
        """Test the partner slot converges geometrically to the high rank.

        The observer's card is known to be the low rank, so the partner's
        low-rank mass shrinks by ``1 - weight`` every step.
        """
        steps = list(v1_belief_steps(tiny_config, tiny_observation, num_iters=20, weight=0.1))
        assert len(steps) == 20

        for k, belief in enumerate(steps, start=1):
            grids = slot_grids(tiny_config, belief)
            low = 0.5 * 0.9**k
            np.testing.assert_allclose(grids[0, 0], [1.0, 0.0])
            np.testing.assert_allclose(grids[1, 0], [low, 1.0 - low])

    def test_step_sizes_shrink(self, tiny_config, tiny_observation):
        """Test successive updates get smaller."""
        previous = v0_belief(tiny_config, tiny_observation)
        deltas = []
        for belief in v1_belief_steps(tiny_config, tiny_observation, num_iters=50):
            deltas.append(np.abs(belief - previous).max())
            previous = belief

        assert all(later < earlier for earlier, later in zip(deltas, deltas[1:]))
        assert deltas[-1] < 1e-3

    def test_step_sizes_shrink_standard_game(self, config, hinted_observation):
        """Test updates die out in a standard game with hints."""
        previous = v0_belief(config, hinted_observation)
        deltas = []
        for belief in v1_belief_steps(config, hinted_observation, num_iters=100):
            deltas.append(np.abs(belief - previous).max())
            previous = belief

        assert deltas[0] > 0
        block_peaks = [max(deltas[i : i + 20]) for i in range(0, 100, 20)]
        assert all(later <= earlier for earlier, later in zip(block_peaks, block_peaks[1:]))
        assert deltas[-1] < 1e-2 * deltas[0]

    def test_distributions_respect_knowledge(self, config, hinted_observation):
        """Test occupied slots sum to one and stay on their support."""
        mask = slot_grids(config, card_knowledge_section(config, hinted_observation))
        grids = slot_grids(config, v1_belief(config, hinted_observation))

        np.testing.assert_allclose(grids.sum(axis=-1), 1.0)
        assert (grids[mask == 0] == 0).all()
        assert (grids >= 0).all()

    def test_last_step_is_result(self, config, fresh_observation):
        """Test the generator and the function agree."""
        *_, last = v1_belief_steps(config, fresh_observation, num_iters=5)
        np.testing.assert_array_equal(last, v1_belief(config, fresh_observation, num_iters=5))

    @pytest.mark.parametrize("num_iters, weight", [(0, 0.1), (100, 0.0)])
    def test_degenerate_settings_equal_direct_belief(self, tiny_config, tiny_observation, num_iters, weight):
        """Test no steps or zero weight leaves the direct belief."""
        np.testing.assert_array_equal(
            v1_belief(tiny_config, tiny_observation, num_iters=num_iters, weight=weight),
            v0_belief(tiny_config, tiny_observation),
        )

    def test_encoder_uses_its_settings(self, tiny_config, tiny_observation):
        """Test encode_v1_belief follows the encoder config."""
        direct = CanonicalObservationEncoder(tiny_config, EncoderConfig(belief_iterations=0))
        refined = CanonicalObservationEncoder(tiny_config, EncoderConfig(belief_iterations=3))

        np.testing.assert_array_equal(
            direct.encode_v1_belief(tiny_observation), direct.encode_v0_belief(tiny_observation)
        )
        low = 0.5 * 0.9**3
        np.testing.assert_allclose(refined.encode_v1_belief(tiny_observation), [1, 0, low, 1 - low], rtol=1e-6)
        assert refined.encode_v1_belief(tiny_observation).dtype == np.float32


class TestExtractBelief:
    """Test dropping hint entries from a knowledge section."""

    def test_length(self, config, fresh_observation):
        """Test one grid per slot."""
        belief = extract_belief(config, card_knowledge_section(config, fresh_observation))
        assert belief.shape == (2 * 5 * 25,)
        assert belief.sum() == 250

    def test_wrong_length(self, config):
        """Test sections of the wrong size are rejected."""
        with pytest.raises(EncodingInvariantError):
            extract_belief(config, np.zeros(349))
