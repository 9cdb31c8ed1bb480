import sys

from lesson_admin.importer import main


if __name__ == "__main__":
    sys.exit(main())
