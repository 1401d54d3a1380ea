"""SQL for the PostgreSQL policy store.

Templates take the schema name via ``str.format``; the schema is validated
before any template is rendered. Every query filters by domain.
"""

from typing import Dict

from ....config.constants import Action, DatabaseSchemas, ResourceType, Role


def _in_list(values) -> str:
    return ", ".join(f"'{value.value}'" for value in values)


CREATE_SCHEMA = "CREATE SCHEMA IF NOT EXISTS {schema}"

CREATE_ROLE_ASSIGNMENTS_TABLE = f"""
    CREATE TABLE IF NOT EXISTS {{schema}}.{DatabaseSchemas.ROLE_ASSIGNMENTS_TABLE} (
        domain VARCHAR(255) NOT NULL,
        user_id VARCHAR(255) NOT NULL,
        role VARCHAR(32) NOT NULL CHECK (role IN ({_in_list(Role)})),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        PRIMARY KEY (domain, user_id, role)
    )
"""

CREATE_POLICIES_TABLE = f"""
    CREATE TABLE IF NOT EXISTS {{schema}}.{DatabaseSchemas.POLICIES_TABLE} (
        domain VARCHAR(255) NOT NULL,
        subject VARCHAR(255) NOT NULL,
        resource_type VARCHAR(64) NOT NULL CHECK (resource_type IN ({_in_list(ResourceType)})),
        action VARCHAR(32) NOT NULL CHECK (action IN ({_in_list(Action)})),
        created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
        PRIMARY KEY (domain, subject, resource_type, action)
    )
"""

# Serializes mutations of one domain until the surrounding transaction ends
DOMAIN_ADVISORY_LOCK = "SELECT pg_advisory_xact_lock(hashtext($1))"

SELECT_USER_ROLES = f"""
    SELECT role
    FROM {{schema}}.{DatabaseSchemas.ROLE_ASSIGNMENTS_TABLE}
    WHERE domain = $1 AND user_id = $2
"""

SELECT_ROLE_ASSIGNMENTS = f"""
    SELECT user_id, role
    FROM {{schema}}.{DatabaseSchemas.ROLE_ASSIGNMENTS_TABLE}
    WHERE domain = $1
    ORDER BY user_id, role
"""

INSERT_ROLE_ASSIGNMENT = f"""
    INSERT INTO {{schema}}.{DatabaseSchemas.ROLE_ASSIGNMENTS_TABLE} (domain, user_id, role)
    VALUES ($1, $2, $3)
    ON CONFLICT DO NOTHING
"""

DELETE_ROLE_ASSIGNMENT = f"""
    DELETE FROM {{schema}}.{DatabaseSchemas.ROLE_ASSIGNMENTS_TABLE}
    WHERE domain = $1 AND user_id = $2 AND role = $3
"""

INSERT_POLICY = f"""
    INSERT INTO {{schema}}.{DatabaseSchemas.POLICIES_TABLE} (domain, subject, resource_type, action)
    VALUES ($1, $2, $3, $4)
    ON CONFLICT DO NOTHING
"""

DELETE_POLICY = f"""
    DELETE FROM {{schema}}.{DatabaseSchemas.POLICIES_TABLE}
    WHERE domain = $1 AND subject = $2 AND resource_type = $3 AND action = $4
"""

SELECT_POLICIES = f"""
    SELECT subject, resource_type, action
    FROM {{schema}}.{DatabaseSchemas.POLICIES_TABLE}
    WHERE domain = $1
      AND ($2::text IS NULL OR subject = $2)
      AND ($3::text IS NULL OR resource_type = $3)
      AND ($4::text IS NULL OR action = $4)
    ORDER BY subject, resource_type, action
"""


def render_queries(schema: str) -> Dict[str, str]:
    """Render every statement for ``schema``."""
    templates = {
        "create_schema": CREATE_SCHEMA,
        "create_role_assignments_table": CREATE_ROLE_ASSIGNMENTS_TABLE,
        "create_policies_table": CREATE_POLICIES_TABLE,
        "select_user_roles": SELECT_USER_ROLES,
        "select_role_assignments": SELECT_ROLE_ASSIGNMENTS,
        "insert_role_assignment": INSERT_ROLE_ASSIGNMENT,
        "delete_role_assignment": DELETE_ROLE_ASSIGNMENT,
        "insert_policy": INSERT_POLICY,
        "delete_policy": DELETE_POLICY,
        "select_policies": SELECT_POLICIES,
    }
    rendered = {name: template.format(schema=schema) for name, template in templates.items()}
    rendered["domain_advisory_lock"] = DOMAIN_ADVISORY_LOCK
    return rendered
