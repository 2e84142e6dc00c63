from __future__ import annotations

from hookbuttons.api import (
    ButtonConfig,
    ButtonService,
    InboundRequest,
    MemoryAccessoryStore,
    PressEvent,
    generate_uuid,
)


def test_service_end_to_end_without_listener() -> None:
    service = ButtonService(config=ButtonConfig(buttons=("Front Door",)), store=MemoryAccessoryStore())

    result = service.setup()

    assert result.added == ("Front Door",)
    assert service.router is not None
    response = service.router.dispatch(
        InboundRequest(
            method="POST",
            path="/button-front-door",
            body={"event": "double-click"},
            headers={"button-battery-level": "80"},
        )
    )
    assert response.status == 200
    [device] = service.list_devices()
    assert device.uuid == generate_uuid("Front Door")
    assert device.battery.current_level() == 80


def test_service_lists_stale_cache_entries() -> None:
    store = MemoryAccessoryStore()
    ButtonService(config=ButtonConfig(buttons=("A", "B")), store=store).setup()

    service = ButtonService(config=ButtonConfig(buttons=("B",)), store=store)
    cached = {record.display_name: configured for record, configured in service.list_cached()}

    assert cached == {"A": False, "B": True}


def test_service_serves_on_ephemeral_port() -> None:
    service = ButtonService(
        config=ButtonConfig(buttons=("Garage",), host="127.0.0.1", port=0),
        store=MemoryAccessoryStore(),
    )
    server = service.serve()
    try:
        assert server.port != 0
        assert [route.path for route in service.list_routes()] == ["/button-garage"]
    finally:
        service.stop()


def test_press_event_values_follow_switch_codes() -> None:
    assert [int(e) for e in PressEvent] == [0, 1, 2]
