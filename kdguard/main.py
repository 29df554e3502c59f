import os
import sys
import logging
import argparse
import configparser
from pathlib import Path

from . import pwgen, backend
from .ui import KdguardUI
from .context import Context
from .errors import KdguardError, MissingSeed, WordlistError
from .fileformat import default_filename
from .wordlist import DATA_DIR, load_wordlist, load_common_passwords

log = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = DATA_DIR / 'kdguard.conf'
DEFAULT_SEED_ENV = 'KDGUARD_SEED'


def default_output_dir() -> Path:
    documents = Path('~/Documents').expanduser()
    return documents if documents.is_dir() else Path('~').expanduser()


class Config:

    def __init__(self, config_file):
        self.default_length = pwgen.DEFAULT_LENGTH
        self.default_count = 1
        self.default_mode = 'random'
        self.language = pwgen.DEFAULT_LANGUAGE
        self.auto_save = False
        self.output_dir = None
        self.seed_env = DEFAULT_SEED_ENV
        self.log_file = None
        self.wordlist_sources = {}
        self.common_source = None
        self.load(config_file)

    def load(self, config_file):
        config_file = Path(config_file).expanduser()
        log.info("Loading config %r", str(config_file))
        config = configparser.ConfigParser()
        try:
            config.read(config_file, encoding='utf-8')
        except configparser.Error as e:
            raise KdguardError(f"Invalid config {str(config_file)!r}: {e}") from e
        for section in config.sections():
            if section == 'kdguard':
                self._load_general(config[section], config_file)
            elif section == 'wordlists':
                self.wordlist_sources.update(config[section])
            elif section == 'common':
                self._load_common(config[section], config_file)
            else:
                print(f"WARNING: unknown section {section!r} in config {str(config_file)!r}")

    def _load_general(self, section, config_file):
        for key in section:
            try:
                if key in ('default_length', 'default_count'):
                    setattr(self, key, section.getint(key))
                elif key == 'auto_save':
                    self.auto_save = section.getboolean(key)
                elif key == 'default_mode':
                    if section[key] not in pwgen.MODES:
                        raise ValueError(f"unknown mode {section[key]!r}")
                    self.default_mode = section[key]
                elif key in ('language', 'seed_env'):
                    setattr(self, key, section[key])
                elif key in ('output_dir', 'log_file'):
                    setattr(self, key, Path(section[key]).expanduser())
                else:
                    print(f"WARNING: unknown key [{section.name}] {key!r} "
                          f"in config {str(config_file)!r}")
            except ValueError as e:
                raise KdguardError(f"Invalid value of [{section.name}] {key!r} "
                                   f"in config {str(config_file)!r}: {e}") from e

    def _load_common(self, section, config_file):
        for key in section:
            if key == 'source':
                self.common_source = section[key]
            else:
                print(f"WARNING: unknown key [{section.name}] {key!r} "
                      f"in config {str(config_file)!r}")

    def output_path(self, override=None) -> Path:
        name = override or default_filename()
        if Path(name).is_absolute():
            return Path(name)
        return (self.output_dir or default_output_dir()) / name


def setup_logging(verbose, log_file=None):
    level = logging.INFO if verbose else logging.ERROR
    if log_file is not None:
        logging.basicConfig(filename=str(log_file), level=level,
                            format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    else:
        logging.basicConfig(level=level, format='%(levelname)s: %(message)s')


def read_seed(env_name):
    """Read seed from environment variable `env_name`."""
    seed = os.environ.get(env_name, '')
    if not seed:
        raise MissingSeed(f"Environment variable {env_name!r} is not set or empty")
    return seed


def run_generate(cfg, mode, length, pattern, words, language, seed_env,
                 service, salt, count, save, output, copy):
    mode = mode or cfg.default_mode
    language = language or cfg.language
    request = pwgen.GenerationRequest(
        mode=mode,
        length=length if length is not None else cfg.default_length,
        pattern=pattern,
        words=words if words is not None else pwgen.DEFAULT_WORDS,
        language=language,
        service=service,
        salt=salt,
    )
    wordlists = ()
    if mode == 'deterministic':
        request.seed = read_seed(seed_env or cfg.seed_env)
    elif mode == 'phrase':
        wordlists = (load_wordlist(language, cfg.wordlist_sources.get(language)),)
    output_file = None
    if save or output or cfg.auto_save:
        output_file = cfg.output_path(output)
    count = count if count is not None else cfg.default_count
    ui = KdguardUI(Context(wordlists=wordlists))
    ui.cmd_generate(request, count, output_file=output_file, copy=copy)


def run_check(cfg, password, detailed):
    try:
        common = load_common_passwords(cfg.common_source)
    except WordlistError as e:
        print(f"WARNING: common password list unavailable: {e}")
        common = None
    ui = KdguardUI(Context(common_passwords=common))
    ui.cmd_check(password, detailed)


def parse_args(argv=None):
    """Process command line args."""
    ap = argparse.ArgumentParser(prog="kdguard",
                                 description="Generate secure passwords and check their strength",
                                 formatter_class=argparse.RawTextHelpFormatter)
    ap.add_argument('-c', '--config', dest='config_file', default=DEFAULT_CONFIG_FILE,
                    help="config file (default: %(default)s)")
    ap.add_argument('-v', '--verbose', action='store_true',
                    help="log what is being done")

    # Sub-commands
    sp = ap.add_subparsers()
    ap_gen = sp.add_parser("gen", aliases=['g'],
                           help="generate passwords (default)")
    ap_gen.set_defaults(func=run_generate)
    ap_check = sp.add_parser("check", aliases=['c'],
                             help="check strength of a password")
    ap_check.set_defaults(func=run_check)

    ap_gen.add_argument('-m', '--mode', choices=pwgen.MODES,
                        help="generation mode (default: from config, or random)")
    ap_gen.add_argument('-l', dest='length', type=int,
                        help=f"random: length of password, {pwgen.MIN_LENGTH}-{pwgen.MAX_LENGTH} "
                             f"(default: {pwgen.DEFAULT_LENGTH})")
    ap_gen.add_argument('-p', dest='pattern',
                        help="pattern: U = uppercase, L = lowercase, D = digit, S = special\n"
                             "(e.g. ULLLDDSS)")
    ap_gen.add_argument('-w', dest='words', type=int,
                        help=f"phrase: number of words, {pwgen.MIN_WORDS}-{pwgen.MAX_WORDS} "
                             f"(default: {pwgen.DEFAULT_WORDS})")
    ap_gen.add_argument('--lang', dest='language',
                        help=f"phrase: wordlist language (default: {pwgen.DEFAULT_LANGUAGE})")
    ap_gen.add_argument('--seed-env',
                        help=f"deterministic: environment variable holding the seed "
                             f"(default: {DEFAULT_SEED_ENV})")
    ap_gen.add_argument('--service',
                        help="deterministic: service name, e.g. github")
    ap_gen.add_argument('--salt',
                        help=f"deterministic: salt (default: {pwgen.DEFAULT_SALT!r})")
    ap_gen.add_argument('-n', dest='count', type=int,
                        help="number of passwords (default: 1)")
    ap_gen.add_argument('-s', '--save', action='store_true',
                        help="save passwords to a file")
    ap_gen.add_argument('-o', dest='output',
                        help="output file name (implies --save)")
    ap_gen.add_argument('--copy', action='store_true',
                        help="copy the first password to clipboard")

    ap_check.add_argument('password', nargs='?',
                          help="password to check (prompted when omitted)")
    ap_check.add_argument('-d', '--detailed', action='store_true',
                          help="show sub-scores, warnings and suggestions")

    args = ap.parse_args(args=argv)

    if 'func' not in args:
        ap_gen.parse_args(args=[], namespace=args)

    return args


def main(argv=None):
    """Main program

    :param argv: Used in tests. Default is sys.argv
    :return: Exit status
    """
    args = parse_args(argv)
    run_func = args.func
    config_file = args.config_file
    verbose = args.verbose
    for name in ('func', 'config_file', 'verbose'):
        delattr(args, name)
    try:
        cfg = Config(config_file)
        setup_logging(verbose, cfg.log_file)
        log.info("Using randombytes from %s, hkdf_sha256 from %s",
                 backend.backend_for('randombytes'), backend.backend_for('hkdf_sha256'))
        run_func(cfg, **vars(args))
    except (KdguardError, backend.MissingError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
