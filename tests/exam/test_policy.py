"""Tests for the layer-completion policy."""

from __future__ import annotations

from viva.exam import is_layer_complete, next_unprobed_layer
from viva.model import LAYER_ORDER, ProbeLayer


class TestIsLayerComplete(object):
    """Tests for is_layer_complete()."""

    def test_nothing_probed(self) -> None:
        assert is_layer_complete([], []) is False

    def test_all_layers_probed(self) -> None:
        """Covering every layer completes the vertex regardless of scores."""
        assert is_layer_complete(LAYER_ORDER, [3, 3, 3, 3]) is True

    def test_two_weak_scores(self) -> None:
        layers = [ProbeLayer.Recall, ProbeLayer.Mechanism]
        assert is_layer_complete(layers, [2, 1]) is True

    def test_two_strong_scores(self) -> None:
        layers = [ProbeLayer.Recall, ProbeLayer.Mechanism]
        assert is_layer_complete(layers, [4, 5]) is True

    def test_one_weak_one_strong_is_not_decisive(self) -> None:
        layers = [ProbeLayer.Recall, ProbeLayer.Mechanism]
        assert is_layer_complete(layers, [2, 4]) is False

    def test_borderline_scores_do_not_count(self) -> None:
        """A score of 3 is neither weak nor strong."""
        layers = [ProbeLayer.Recall, ProbeLayer.Mechanism, ProbeLayer.Clinical]
        assert is_layer_complete(layers, [3, 3, 2]) is False

    def test_repeated_layer_scores_count(self) -> None:
        """Two strong scores on the same layer are still decisive."""
        assert is_layer_complete([ProbeLayer.Recall], [4, 4]) is True


class TestNextUnprobedLayer(object):
    """Tests for next_unprobed_layer()."""

    def test_starts_with_recall(self) -> None:
        assert next_unprobed_layer([]) is ProbeLayer.Recall

    def test_follows_canonical_order(self) -> None:
        """Gaps in the probed set are filled in canonical order."""
        assert next_unprobed_layer([ProbeLayer.Recall, ProbeLayer.Clinical]) is ProbeLayer.Mechanism

    def test_none_when_all_probed(self) -> None:
        assert next_unprobed_layer(LAYER_ORDER) is None
