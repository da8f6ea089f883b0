"""Shared fixtures: a sample controller, a test logger and run contexts."""

import logging

import pytest

from migro.engine.policy import EngineConfig, Mode, RunContext

CONTROLLER = """\
using Microsoft.AspNetCore.Authorization;
using Microsoft.AspNetCore.Mvc;

namespace Shop.Controllers
{
    [ApiController]
    [Route("api/[controller]")]
    public class OrdersController : ControllerBase
    {
        public OrdersController(IOrderService service)
        {
            _service = service;
        }

        [HttpGet]
        public async Task<IActionResult> List()
        {
            return Ok(await _service.ListAsync());
        }

        [Authorize]
        [HttpGet("{id}")]
        public async Task<ActionResult<Order>> Get(int id)
        {
            return Ok(await _service.GetAsync(id));
        }

        [Authorize(Roles = "Clerk")]
        [Route("bulk")]
        [Authorize(Policy = "Legacy")]
        [HttpPost]
        public IActionResult Bulk([FromBody] List<Order> orders)
        {
            return NoContent();
        }

        private bool Exists(int id)
        {
            return _service.Exists(id);
        }
    }
}
"""


class ScriptedConfirm:
    """Stands in for the terminal prompt. Pops answers in order and records the questions."""

    def __init__(self, *answers: bool):
        self.answers = list(answers)
        self.questions: list[str] = []

    def __call__(self, message: str) -> bool:
        self.questions.append(message)
        return self.answers.pop(0)


@pytest.fixture
def controller_text() -> str:
    return CONTROLLER


@pytest.fixture
def controller_lines() -> list[str]:
    return CONTROLLER.splitlines()


@pytest.fixture
def test_logger(caplog) -> logging.Logger:
    caplog.set_level(logging.DEBUG, logger="migro_test")
    return logging.getLogger("migro_test")


@pytest.fixture
def make_ctx(test_logger):
    """Build a RunContext that logs through caplog and never reads stdin."""

    def _make(mode: Mode = Mode.INTERACTIVE, *, confirm=None, **kwargs) -> RunContext:
        engine = kwargs.pop("engine", EngineConfig())
        return RunContext(
            mode=mode,
            engine=engine,
            confirm=confirm or ScriptedConfirm(),
            logger=test_logger,
            **kwargs,
        )

    return _make


@pytest.fixture
def scripted():
    """The ScriptedConfirm class, e.g. `scripted(True, False)`."""
    return ScriptedConfirm
