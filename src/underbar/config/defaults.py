"""默认配置常量"""

VERBOSE_DEFAULT = False

# delay 使用的定时器线程是否为守护线程
TIMER_DAEMON_DEFAULT = True

# None 表示使用系统熵源
SHUFFLE_SEED_DEFAULT = None

JSON_INDENT_DEFAULT = 2
JSON_INDENT_MAX = 8

ENV_PREFIX = "UNDERBAR_"
