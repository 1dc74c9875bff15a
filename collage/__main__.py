"""
collageデモのエントリポイント

`python -m collage` として実行することができます
"""

import sys
from collage.demo import main

if __name__ == "__main__":
    sys.exit(main())
