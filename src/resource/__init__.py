"""Role parameter resource.

Maps a declarative create/read/delete lifecycle onto `ALTER ROLE ... SET` and
`ALTER ROLE ... RESET` against a live Postgres server.
"""
