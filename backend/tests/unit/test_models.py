"""
Unit tests for ORM timestamp columns.
"""

from datetime import datetime

import pytest
from sqlalchemy import DateTime, select
from sqlmodel import SQLModel

from fitcoach.infrastructure.db.models import ChatThread, WorkoutSessionModel


def _timestamp_columns():
    return [
        (table.name, column)
        for table in SQLModel.metadata.sorted_tables
        for column in table.columns
        if isinstance(column.type, DateTime)
    ]


class TestTimestampColumns:

    def test_every_timestamp_is_naive_datetime(self):
        columns = _timestamp_columns()
        assert columns
        for table_name, column in columns:
            assert type(column.type) is DateTime, f"{table_name}.{column.name}"
            assert column.type.timezone is False, f"{table_name}.{column.name}"
            assert column.nullable is False, f"{table_name}.{column.name}"

    @pytest.mark.parametrize(
        "table_name, column_name",
        [
            ("users", "created_at"),
            ("profiles", "updated_at"),
            ("coach_personas", "updated_at"),
            ("workout_sessions", "date"),
            ("progress_logs", "date"),
            ("training_plans", "created_at"),
            ("nutrition_plans", "created_at"),
            ("chat_threads", "updated_at"),
            ("chat_messages", "created_at"),
        ],
    )
    def test_expected_columns_are_covered(self, table_name, column_name):
        names = {(table, column.name) for table, column in _timestamp_columns()}
        assert (table_name, column_name) in names

    async def test_naive_timestamp_round_trips(self, session_scope, user_id):
        when = datetime(2025, 3, 14, 9, 30, 0)

        async with session_scope() as session:
            session.add(WorkoutSessionModel(user_id=user_id, name="Upper A", date=when))

        async with session_scope() as session:
            result = await session.execute(select(WorkoutSessionModel))
            workout = result.scalar_one()

        assert workout.date == when
        assert workout.date.tzinfo is None
        assert workout.created_at.tzinfo is None

    async def test_default_timestamps_are_filled(self, session_scope, user_id):
        async with session_scope() as session:
            thread = ChatThread(user_id=user_id)
            session.add(thread)
            await session.flush()
            assert isinstance(thread.created_at, datetime)
            assert thread.updated_at.tzinfo is None
