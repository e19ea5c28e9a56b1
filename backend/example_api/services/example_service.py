"""
Example API — Example Service (Business Logic)
================================================

What:  Lookup and creation of examples, independent of HTTP concerns.
Why:   Keeps route handlers thin; the rules can be tested without a client.
How:   Only one example exists (id 1, title "Test"). Creation echoes the title
       back with an id from the injected IdGenerator. Nothing is stored.
Who:   Called by the route handlers in routes/examples.py.
"""

import logging

from example_api.exceptions import NotFoundError
from example_api.schemas.example import ExampleResponse
from example_api.services.id_generator import IdGenerator

logger = logging.getLogger(__name__)

# The single example GET /api/examples/{id} knows about
BUILTIN_EXAMPLE_ID = 1
BUILTIN_EXAMPLE_TITLE = "Test"


class ExampleService:
    """
    Business logic layer for example operations.

    Responsibilities:
        - get_example(): Return the built-in example or raise NotFoundError
        - create_example(): Build a new example with a generated id
    """

    def __init__(self, id_generator: IdGenerator):
        self.id_generator = id_generator

    async def get_example(self, example_id: int) -> ExampleResponse:
        """
        Retrieve a single example by ID.

        Raises:
            NotFoundError: Any id other than BUILTIN_EXAMPLE_ID (→ 404)
        """
        if example_id != BUILTIN_EXAMPLE_ID:
            raise NotFoundError(resource="example", resource_id=str(example_id))

        return ExampleResponse(id=example_id, title=BUILTIN_EXAMPLE_TITLE)

    async def create_example(self, title: str) -> ExampleResponse:
        """
        Create an example from a title.

        The id comes from the injected generator; the example is not persisted,
        so a later GET for the same id still returns 404.
        """
        example_id = self.id_generator.next_id()
        logger.info("Example created: id=%d", example_id)
        return ExampleResponse(id=example_id, title=title)
