from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "student_affairs"
    connection_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict; missing keys keep the defaults."""
        return cls(
            host=str(db_config.get("host") or cls.host),
            port=int(db_config.get("port") or cls.port),
            user=str(db_config.get("user") or cls.user),
            password=str(db_config.get("password") or cls.password),
            database=str(db_config.get("database") or cls.database),
            connection_timeout=int(db_config.get("connection_timeout") or cls.connection_timeout),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "connection_timeout": self.connection_timeout,
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Opens one short-lived connection per operation.

    Recap fetches run on worker threads; each call gets its own connection.
    """

    def __init__(self, config: DBConfig):
        self.config = config

    def connect(self):
        return mysql.connector.connect(**self.config.connect_kwargs())
