# creates database schema
import sys

from backend.db import Base, engine, init_db


def main(argv=None, bind=None):
    argv = sys.argv[1:] if argv is None else argv
    bind = bind or engine

    # Drop all tables first when asked to
    if "--reset" in argv:
        import backend.models  # noqa: F401
        Base.metadata.drop_all(bind=bind)
        print("All tables dropped")

    # Create tables based on existing models
    init_db(bind)
    print("Database schema created")


if __name__ == "__main__":
    main()
