"""Fake storage backend - records every call for router-level assertions.

Returns configurable results and can raise a preset error per operation.
"""


class FakeStorage:
    def __init__(self):
        self.calls = []
        self.rows = []
        self.next_id = 1
        self.affected = 1
        self.errors = {}

    def _record(self, op, **kwargs):
        self.calls.append({"op": op, **kwargs})
        if op in self.errors:
            raise self.errors[op]

    async def create_table(self, name, columns):
        self._record("create_table", table=name, columns=tuple(columns))

    async def select(self, table, columns, where, args, order_by):
        self._record(
            "select", table=table, columns=columns, where=where,
            args=tuple(args), order_by=order_by,
        )
        return list(self.rows)

    async def insert(self, table, row):
        self._record("insert", table=table, row=row)
        new_id = self.next_id
        self.next_id += 1
        return new_id

    async def update(self, table, row, where, args):
        self._record("update", table=table, row=row, where=where, args=tuple(args))
        return self.affected

    async def delete(self, table, where, args):
        self._record("delete", table=table, where=where, args=tuple(args))
        return self.affected
