import sys

from nussinov_fold.scripts.fold_rna import main


if __name__ == '__main__':
    sys.exit(main())
