import sys

from lesson_admin.screen_order import main


if __name__ == "__main__":
    sys.exit(main())
