# test/test_builder.py
from sqlalchemy import func, inspect

from dtforge.core.params import RequestParameters
from dtforge.core.query.builder import QueryComposer
from dtforge.core.query.operators import SearchGroup, like_pattern
from dtforge.db.executor import QueryRunner

from sample_models import USER_COLUMNS, Member, Post, User


def compose(session, query=None, overrides=None, columns=USER_COLUMNS, **params):
    query = query if query is not None else session.query(User)
    composer = QueryComposer(
        RequestParameters(**params),
        QueryRunner(session),
        "users",
        list(columns),
        search_overrides=overrides,
    )
    return composer, composer.build(query, query)


def sql_of(query):
    return str(query.statement.compile(compile_kwargs={"literal_binds": True}))


def test_plain_request_only_paginates(session):
    _, composed = compose(session, offset=10, limit=5)

    assert composed.total_records == 20
    assert composed.records_filtered == 20
    assert [user.id for user in composed.query.all()] == [11, 12, 13, 14, 15]
    assert "LIKE" not in sql_of(composed.query)


def test_search_filters_on_qualified_columns(session):
    _, composed = compose(
        session, is_search_request=True, search_value="user1", limit=50
    )

    sql = sql_of(composed.query)
    assert "users.name LIKE '%user1%'" in sql
    assert "users.email LIKE '%user1%'" in sql
    assert composed.total_records == 20
    assert composed.records_filtered == 11
    assert sorted(user.id for user in composed.query.all()) == [1] + list(range(10, 20))


def test_search_is_restricted_to_requested_columns(session):
    composer = QueryComposer(
        RequestParameters(is_search_request=True, search_value="Porto", columns=["name", "email", "unknown"]),
        QueryRunner(session),
        "users",
        list(USER_COLUMNS),
    )
    assert composer.search_columns() == ["name", "email"]

    composed = composer.build(session.query(User), session.query(User))
    assert composed.records_filtered == 0
    assert "users.unknown" not in sql_of(composed.query)


def test_search_without_a_known_searchable_column_uses_every_column(session):
    composer = QueryComposer(
        RequestParameters(is_search_request=True, search_value="user05", columns=["unknown"]),
        QueryRunner(session),
        "users",
        list(USER_COLUMNS),
    )
    assert composer.search_columns() == USER_COLUMNS

    composed = composer.build(session.query(User), session.query(User))
    assert composed.records_filtered == 1


def test_string_override_replaces_the_default_target(session):
    composer = QueryComposer(
        RequestParameters(is_search_request=True, search_value="x"),
        QueryRunner(session),
        "users",
        ["city"],
        search_overrides={"city": "t2.col"},
    )
    sql = sql_of(composer.apply_search(session.query(User)))
    assert "t2.col LIKE '%x%'" in sql
    assert "users.city LIKE" not in sql


def test_column_expression_override(session):
    _, composed = compose(
        session,
        overrides={"name": func.upper(User.name)},
        columns=["name"],
        is_search_request=True,
        search_value="USER05",
    )
    assert composed.records_filtered == 1


def test_callback_override_returning_a_target(session):
    calls = []

    def search_city(group, search_value, datatable):
        calls.append((search_value, datatable))
        return "users.city"

    _, composed = compose(
        session,
        overrides={"name": search_city},
        columns=["name"],
        is_search_request=True,
        search_value="Lisbon",
    )
    assert calls == [("Lisbon", None)]
    assert composed.records_filtered == 10


def test_callback_override_adding_its_own_condition(session):
    def exact_id(group, search_value, datatable):
        if search_value.isdigit():
            group.or_where(User.id == int(search_value))

    _, composed = compose(
        session,
        overrides={"id": exact_id},
        columns=["id"],
        is_search_request=True,
        search_value="7",
    )
    assert [user.id for user in composed.query.all()] == [7]


def test_callback_override_can_join(session):
    def by_post_title(group, search_value, datatable):
        group.query = group.query.join(Post, Post.user_id == User.id)
        return "posts.title"

    _, composed = compose(
        session,
        overrides={"name": by_post_title},
        columns=["name"],
        is_search_request=True,
        search_value="grid",
    )
    assert sorted(user.id for user in composed.query.all()) == [1, 2]


def test_empty_search_group_adds_no_filter(session):
    _, composed = compose(
        session,
        overrides={"name": lambda group, value, dt: None},
        columns=["name"],
        is_search_request=True,
        search_value="nothing-matches",
    )
    assert composed.records_filtered == 20
    assert "WHERE" not in sql_of(composed.query)


def test_ordering(session):
    _, composed = compose(session, order_by="name", order_direction="desc", limit=3)
    assert [user.name for user in composed.query.all()] == ["user20", "user19", "user18"]

    _, composed = compose(session, order_by="email", order_direction="asc", limit=2)
    assert [user.id for user in composed.query.all()] == [1, 2]


def test_order_name_is_quoted_not_interpolated(session):
    _, composed = compose(session, order_by="name; DROP TABLE users", order_direction="asc")
    assert '"name; DROP TABLE users"' in sql_of(composed.query)


def test_negative_length_means_every_row(session):
    _, composed = compose(session, limit=-1, offset=-5)
    assert len(composed.query.all()) == 20


def test_wildcards_in_the_search_term_are_not_escaped(session):
    assert like_pattern("50%") == "%50%%"
    _, composed = compose(
        session, columns=["name"], is_search_request=True, search_value="_", limit=100
    )
    assert composed.records_filtered == 20


def test_search_group_collects_conditions(session):
    group = SearchGroup(session.query(User), "ana")
    assert not group

    group.or_like("users.name").or_like(User.email, "other")
    assert len(group) == 2
    sql = str(group.clause().compile(compile_kwargs={"literal_binds": True}))
    assert "users.name LIKE '%ana%'" in sql
    assert "users.email LIKE '%other%'" in sql


def test_mapped_keys_resolve_to_table_columns(session):
    composer = QueryComposer(
        RequestParameters(
            is_search_request=True,
            search_value="ana",
            order_by="full_name",
            order_direction="asc",
        ),
        QueryRunner(session),
        "members",
        ["member_id", "full_name"],
        mapper=inspect(Member),
    )
    composed = composer.build(session.query(Member), session.query(Member))

    sql = sql_of(composed.query)
    assert "members.name LIKE '%ana%'" in sql
    assert "members.id LIKE '%ana%'" in sql
    assert "ORDER BY members.name ASC" in sql
    assert "full_name" not in sql
    assert [member.member_id for member in composed.query.all()] == [1, 3]
