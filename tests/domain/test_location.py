"""Tests for console locations and the root menu."""

from __future__ import annotations

from kuructl.domain.location import ROOT, ROOT_REGISTRY, Layer, LayerId, Root


class TestLocation:
    def test_root_equality(self) -> None:
        assert Root() == ROOT

    def test_layer_equality(self) -> None:
        assert Layer(2) == Layer(2)
        assert Layer(2) != Layer(1)
        assert Layer(2) != ROOT

    def test_hashable(self) -> None:
        assert len({ROOT, Root(), Layer(1), Layer(1)}) == 2


class TestRootRegistry:
    def test_layers_in_order(self) -> None:
        assert ROOT_REGISTRY.names() == ["link", "net", "unreliable", "reliable"]

    def test_ids_match_layer_enum(self) -> None:
        assert [c.id for c in ROOT_REGISTRY] == [
            LayerId.LINK,
            LayerId.NET,
            LayerId.UNRELIABLE,
            LayerId.RELIABLE,
        ]

    def test_daemon_not_navigable(self) -> None:
        assert ROOT_REGISTRY.find_by_id(LayerId.DAEMON) is None

    def test_docs(self) -> None:
        net = ROOT_REGISTRY.find("net")
        assert net is not None
        assert net.doc == "Changes to net layer directory"
