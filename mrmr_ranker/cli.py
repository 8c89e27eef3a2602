"""
Command line interface: rank the attributes of a delimited text dataset.

Reads from FILE or standard input; named pipes and process substitution work
as FILE too.
"""

import argparse
import logging
import sys

from . import __version__
from .config import DEFAULT_DELIMITER, DiscretizationMethod, RankingConfig
from .dataset import Dataset
from .errors import MrmrError
from .selector import MrmrSelector, write_ranking
from .utils import configure_logging, log_step, parse_verbosity, ranking_summary

logger = logging.getLogger(__name__)

EXIT_USAGE = 1
EXIT_DATA = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog='mrmr-ranker',
        description='Compute mRMR values for attributes in a data set, taking input '
                    'from a file or from standard input.')
    parser.add_argument('file', nargs='?', default=None,
                        help='Input file; standard input if omitted')
    parser.add_argument('-t', '--delimiter', default=DEFAULT_DELIMITER, metavar='CHAR',
                        help='Field separator character; defaults to TAB')
    parser.add_argument('-c', '--class', dest='class_number', type=int, default=1,
                        metavar='NUM', help='1-indexed class attribute; defaults to 1')
    parser.add_argument('-d', '--discretize', choices=DiscretizationMethod.names(),
                        default=None, help='Discretization method; defaults to truncate')
    parser.add_argument('-v', '--verbosity', type=parse_verbosity, default=logging.WARNING,
                        metavar='VALUE',
                        help='One of {0,1,2,3,quiet,warning,info,debug}; defaults to warning')
    parser.add_argument('-w', '--write-data', action='store_true',
                        help='Read, transform and write the data set to standard output')
    parser.add_argument('-V', '--version', action='version',
                        version=f'%(prog)s {__version__}')
    return parser


def _resolve_delimiter(text):
    if text == '\\t':
        return '\t'
    if len(text) != 1:
        raise ValueError("-t, --delimiter=CHAR must be a single character")
    return text


def main(argv=None, stdin=None, stdout=None):
    """
    Run the ranker.

    Parameters:
    -----------
    argv : list of str, optional
        Arguments without the program name; sys.argv[1:] if None
    stdin, stdout : text streams, optional
        Replacements for sys.stdin and sys.stdout

    Returns:
    --------
    exit_code : int
        0 on success, 1 on usage errors, 2 on data errors
    """
    args = build_parser().parse_args(argv)
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    configure_logging(args.verbosity)

    try:
        method = DiscretizationMethod.from_name(args.discretize or 'truncate')
        config = RankingConfig.from_user_selector(
            args.class_number,
            delimiter=_resolve_delimiter(args.delimiter),
            discretization=method,
        )
    except ValueError as e:
        logger.error(str(e))
        return EXIT_USAGE

    try:
        with log_step("Reading and transforming dataset and computing attribute information...",
                      logger):
            if args.file is None:
                logger.debug("Reading from standard input...")
                dataset = Dataset.read(stdin, config.delimiter, config.discretization,
                                       config.code_width)
            else:
                logger.debug(f"Reading from file {args.file}...")
                with open(args.file, 'r', newline='') as stream:
                    dataset = Dataset.read(stream, config.delimiter, config.discretization,
                                           config.code_width)
    except OSError as e:
        logger.error(f"cannot read input: {e}")
        return EXIT_USAGE
    except MrmrError as e:
        logger.error(f"error: {e}")
        return EXIT_DATA

    if args.discretize is None:
        logger.warning("No discretization method chosen. Default 'truncate' used...")

    if args.write_data:
        with log_step("Writing dataset to standard output...", logger):
            dataset.write(stdout, config.delimiter)
        return 0

    if config.class_attribute_index >= dataset.num_attributes:
        logger.error(f"-c, --class=NUM class attribute {args.class_number} out of range "
                     f"for {dataset.num_attributes} attributes")
        return EXIT_USAGE

    with log_step("Performing main mRMR computations...", logger):
        selector = MrmrSelector(config.class_attribute_index,
                                verbose=1 if args.verbosity <= logging.INFO else 0)
        records = selector.rank(dataset)
    write_ranking(stdout, records)
    logger.debug(ranking_summary(records))
    return 0


if __name__ == '__main__':
    sys.exit(main())
