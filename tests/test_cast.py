import pytest

from notifyd.errors import CastError, CastUnavailableError
from notifyd.services.cast import CastController

pytestmark = pytest.mark.asyncio

URL = "http://127.0.0.1:8080/static/abc.wav"


async def test_controller_requires_the_cast_tool(stub_bin) -> None:
    with pytest.raises(CastUnavailableError, match="go-chromecast"):
        CastController()


async def test_cast_loads_url_on_device(stub_bin) -> None:
    stub_bin.caster()
    controller = CastController()

    await controller.cast(controller.target("kitchen", URL))

    assert stub_bin.calls() == [f"go-chromecast load {URL} -u kitchen"]


async def test_cast_failure_carries_stderr(stub_bin) -> None:
    stub_bin.caster()
    controller = CastController()

    with pytest.raises(CastError) as excinfo:
        await controller.cast(controller.target("ghost", URL))

    assert excinfo.value.detail == "unable to find device with uuid ghost"


async def test_target_stops_device_on_exit_even_after_failure(stub_bin) -> None:
    stub_bin.caster()
    controller = CastController()

    with pytest.raises(CastError):
        async with controller.target("ghost", URL) as target:
            await controller.cast(target)

    assert stub_bin.calls()[-1] == "go-chromecast stop -u ghost"


async def test_stop_failure_during_teardown_is_swallowed(stub_bin) -> None:
    stub_bin.install("go-chromecast", 'echo "stop refused" >&2\nexit 2\n')
    controller = CastController()

    async with controller.target("kitchen", URL):
        pass

    with pytest.raises(CastError, match="stop refused"):
        await controller.stop("kitchen")


async def test_custom_cast_tool(stub_bin) -> None:
    stub_bin.caster("my-caster")

    controller = CastController("my-caster")

    assert controller.executable.endswith("my-caster")
