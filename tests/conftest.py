"""
Pytest configuration and shared fixtures for gqlbind tests.

This module provides sample schemas, generator instances and helpers that
build generator input pointing at a temporary directory.
"""

import logging

import pytest

from gqlbind.codegen.core.config import GeneratorInput, normalize
from gqlbind.codegen.core.models import build_model_plan
from gqlbind.codegen.languages.python import PythonGenerator
from gqlbind.codegen.languages.python.config import PYTHON_BUILTIN_TYPE_MAP
from gqlbind.codegen.languages.python.naming import PythonNaming
from gqlbind.logging_config import ROOT_LOGGER_NAME


SAMPLE_SDL = '''\
type Query {
  "Look up a single user."
  user(id: ID!): User
  users(first: Int = 10, status: Status): [User!]!
  search(text: String!): [SearchResult!]!
}

type Mutation {
  createUser(input: NewUser!): User!
}

"""A registered user."""
type User implements Node {
  id: ID!
  firstName: String
  friends(first: Int): [User!]!
  status: Status!
}

interface Node {
  id: ID!
}

union SearchResult = User

enum Status {
  ACTIVE
  INACTIVE
}

input NewUser {
  firstName: String!
  status: Status = ACTIVE
}
'''


@pytest.fixture
def sample_sdl():
    """Schema exercising objects, interfaces, unions, enums and inputs."""
    return SAMPLE_SDL


@pytest.fixture
def python_generator():
    """A fresh Python target with default options."""
    return PythonGenerator()


@pytest.fixture
def naming():
    return PythonNaming()


@pytest.fixture
def make_input(tmp_path):
    """Factory for GeneratorInput writing into ``tmp_path``."""

    def _make(schema_source=SAMPLE_SDL, models=None, **kwargs):
        options = {
            "exec_filename": tmp_path / "generated.py",
            "model_filename": tmp_path / "models_gen.py",
            "module_root": tmp_path,
        }
        options.update(kwargs)
        return GeneratorInput(schema_source=schema_source, models=models, **options)

    return _make


@pytest.fixture
def make_config(make_input):
    """Factory for a normalized GeneratorConfig with the Python built-ins."""

    def _make(schema_source=SAMPLE_SDL, models=None, **kwargs):
        return normalize(make_input(schema_source, models, **kwargs), PYTHON_BUILTIN_TYPE_MAP)

    return _make


@pytest.fixture
def make_model_plan(make_config, naming):
    """Factory returning (config, model plan) for a schema."""

    def _make(schema_source=SAMPLE_SDL, models=None, **kwargs):
        config = make_config(schema_source, models, **kwargs)
        plan = build_model_plan(config.schema, config.type_map, config.model, naming)
        return config, plan

    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave the package logger as tests found it."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = logger.handlers[:]
    level = logger.level
    propagate = logger.propagate
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate
