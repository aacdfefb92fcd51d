"""Unit tests for SqlRuleStore."""

import pytest
from sqlalchemy import select

from astrule.core.rules import parse_rule, serialize_rule
from astrule.infrastructure.persistence.models import RuleModel
from astrule.infrastructure.store import RuleNotFoundError, StoreConnectionError, StoreError


@pytest.mark.asyncio
async def test_save_and_load(sql_store):
    """Test a saved encoding can be loaded back."""
    encoding = serialize_rule(parse_rule("age > 30 AND department == 'Sales'"))
    await sql_store.save("eligible", encoding)

    assert await sql_store.load("eligible") == encoding


@pytest.mark.asyncio
async def test_saved_as_canonical_json(sql_store, db_manager):
    """Test the stored text is compact JSON with sorted keys."""
    await sql_store.save("r", serialize_rule(parse_rule("a > 1")))

    async with db_manager.session() as session:
        result = await session.execute(select(RuleModel).where(RuleModel.name == "r"))
        rule = result.scalar_one()

    assert rule.ast == '{"cmp":">","field":"a","kind":"operand","literal":{"t":"int","v":1}}'
    assert len(rule.id) == 36


@pytest.mark.asyncio
async def test_save_replaces_existing(sql_store):
    """Test saving under an existing name updates the one row."""
    await sql_store.save("r", serialize_rule(parse_rule("a > 1")))
    await sql_store.save("r", serialize_rule(parse_rule("b > 2")))

    assert (await sql_store.load("r"))["field"] == "b"
    assert await sql_store.list_names() == ["r"]


@pytest.mark.asyncio
async def test_load_missing(sql_store):
    """Test loading an unknown name."""
    with pytest.raises(RuleNotFoundError):
        await sql_store.load("nope")


@pytest.mark.asyncio
async def test_load_corrupt_row(sql_store, db_manager):
    """Test a row that is not valid JSON surfaces as a store error."""
    async with db_manager.session() as session:
        session.add(RuleModel(id="x" * 36, name="broken", ast="{oops"))
        await session.commit()

    with pytest.raises(StoreError) as exc_info:
        await sql_store.load("broken")
    assert not isinstance(exc_info.value, RuleNotFoundError)


@pytest.mark.asyncio
async def test_delete_and_list(sql_store):
    """Test deleting and listing rules."""
    for name in ("beta", "alpha"):
        await sql_store.save(name, serialize_rule(parse_rule("x == 1")))

    assert await sql_store.list_names() == ["alpha", "beta"]

    await sql_store.delete("alpha")
    assert await sql_store.list_names() == ["beta"]

    with pytest.raises(RuleNotFoundError):
        await sql_store.delete("alpha")


@pytest.mark.asyncio
async def test_missing_table_is_connection_error(sql_store, db_manager):
    """Test database failures are reported as connection errors."""
    await db_manager.drop_tables()

    with pytest.raises(StoreConnectionError):
        await sql_store.load("r")
    with pytest.raises(StoreConnectionError):
        await sql_store.save("r", serialize_rule(parse_rule("a > 1")))
    with pytest.raises(StoreConnectionError):
        await sql_store.list_names()
