import json
import logging
from typing import Any, Dict, Optional

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json

from src.core.errors import RecordConflictError, StoreBackendError
from src.core.interfaces.trade_store import ITradeStore

logger = logging.getLogger(__name__)


class PostgresTradeStore(ITradeStore):
    """
    Table named after TABLE_NAME with the two key attributes as a composite primary key
    and the full item in a JSONB column. Inserts use ON CONFLICT DO NOTHING.
    """

    backend_name = "postgres"

    def __init__(self, dsn: str, table_name: str, partition_key: str, sort_key: str):
        super().__init__(table_name, partition_key, sort_key)
        self.dsn = dsn
        self._table_ready = False

    def _connect(self):
        return psycopg2.connect(self.dsn)

    def _init_db(self, conn):
        cur = conn.cursor()
        cur.execute(sql.SQL("""
            CREATE TABLE IF NOT EXISTS {table} (
                {pk} VARCHAR NOT NULL,
                {sk} VARCHAR NOT NULL,
                item JSONB NOT NULL,
                created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                PRIMARY KEY ({pk}, {sk})
            );
        """).format(
            table=sql.Identifier(self.table_name),
            pk=sql.Identifier(self.partition_key),
            sk=sql.Identifier(self.sort_key),
        ))
        # DDL commits on its own so a failed insert cannot roll it back
        conn.commit()
        cur.close()
        self._table_ready = True
        logger.info(f"Postgres table '{self.table_name}' ready.")

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        pk_val, sk_val = self.key_of(item)
        insert_query = sql.SQL("""
            INSERT INTO {table} ({pk}, {sk}, item)
            VALUES (%s, %s, %s)
            ON CONFLICT ({pk}, {sk}) DO NOTHING
        """).format(
            table=sql.Identifier(self.table_name),
            pk=sql.Identifier(self.partition_key),
            sk=sql.Identifier(self.sort_key),
        )

        try:
            conn = self._connect()
            try:
                if not self._table_ready:
                    self._init_db(conn)
                cur = conn.cursor()
                cur.execute(insert_query, (pk_val, sk_val, Json(item)))
                inserted = cur.rowcount
                conn.commit()
                cur.close()
            finally:
                conn.close()
        except psycopg2.Error as e:
            raise StoreBackendError.from_exception(e) from e

        if inserted == 0:
            raise RecordConflictError(pk_val, sk_val)

    def get(self, partition_value: str, sort_value: str) -> Optional[Dict[str, Any]]:
        query = sql.SQL("SELECT item FROM {table} WHERE {pk} = %s AND {sk} = %s").format(
            table=sql.Identifier(self.table_name),
            pk=sql.Identifier(self.partition_key),
            sk=sql.Identifier(self.sort_key),
        )
        try:
            conn = self._connect()
            try:
                cur = conn.cursor()
                cur.execute(query, (partition_value, sort_value))
                row = cur.fetchone()
                cur.close()
            finally:
                conn.close()
        except psycopg2.Error as e:
            raise StoreBackendError.from_exception(e) from e

        if row is None:
            return None
        return row[0] if isinstance(row[0], dict) else json.loads(row[0])
