"""pyssids configuration file functionality"""
import configparser
import os

__all__ = ['load_config', 'get_config', 'print_config']

# dir where the default config file is stored, relative to the package
CONFIGDIR = 'utils'
CONFIG_FILENAME = 'ssidrc'

_config = None


def load_config():
    """
    Read the ssidrc configuration file. The defaults shipped with the module
    are read first; values in a user configuration file override them.
    """
    config = configparser.ConfigParser()
    config.read(_find_config_files())
    return config


def get_config():
    """Return the configuration, loading it on first use"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def print_config():
    """Print current configuration options"""
    config = get_config()
    print("FILES USED:")
    for file_ in _find_config_files():
        print("  " + file_)

    print("\nCONFIGURATION:")
    for section in config.sections():
        print("  [{0}]".format(section))
        for option in config.options(section):
            print("  {} = {}".format(option, config.get(section, option)))
        print("")


def _get_home():
    """Find user's home directory if possible.
    Otherwise raise error.
    """
    path = os.path.expanduser("~")

    if not os.path.isdir(path):
        for evar in ('HOME', 'USERPROFILE', 'TMP'):
            path = os.environ.get(evar, '')
            if os.path.isdir(path):
                break
    if path:
        return path
    else:
        raise RuntimeError('please define environment variable $HOME')


def _find_config_files():
    """Finds locations of pyssid configuration files"""
    config_files = []

    # find default configuration file
    module_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    config_files.append(os.path.join(module_dir, CONFIGDIR, CONFIG_FILENAME))

    # if a user configuration file exists, add that to list of files to read
    # so that any values set there will override ones specified in the default
    # config file
    config_path = _get_user_configdir()

    if config_path is not None and \
       os.path.exists(os.path.join(config_path, CONFIG_FILENAME)):
        config_files.append(os.path.join(config_path, CONFIG_FILENAME))

    return config_files


def _get_user_configdir():
    """
    Return the string representing the configuration dir, or None if there
    is none. The default is "HOME/.pyssid". You can override this with the
    PYSSID_CONFIGDIR environment variable
    """
    configdir = os.environ.get('PYSSID_CONFIGDIR')

    if configdir is not None:
        if not os.path.isdir(configdir):
            raise RuntimeError('PYSSID_CONFIGDIR="{0}" is not a directory'
                               .format(configdir))
        return configdir

    try:
        p = os.path.join(_get_home(), '.pyssid')
    except RuntimeError:
        return None
    if os.path.isdir(p):
        return p
    return None
