"""
UniFi controller endpoint path templates.

Each constant is a path relative to the controller base URL. ``{site}`` is
replaced with the site short name by the request dispatcher; templates without
it are controller-wide and must be called without a site selector.
On UniFi OS controllers every path except the authentication ones is served
below :data:`UNIFI_OS_PROXY_PREFIX`.
"""

# Authentication
LOGIN = "/api/login"
LOGOUT = "/logout"
UNIFI_OS_LOGIN = "/api/auth/login"
UNIFI_OS_LOGOUT = "/api/auth/logout"

AUTH_PATHS = frozenset({LOGIN, LOGOUT, UNIFI_OS_LOGIN, UNIFI_OS_LOGOUT})

UNIFI_OS_PROXY_PREFIX = "/proxy/network"

# Controller-wide
STATUS = "/status"
SELF_SITES = "/api/self/sites"
STAT_SITES = "/api/stat/sites"
ALL_ADMINS = "/api/stat/admin"

# Client (station) management
CMD_STAMGR = "/api/s/{site}/cmd/stamgr"
GROUP_USER = "/api/s/{site}/group/user"
UPD_USER = "/api/s/{site}/upd/user"
REST_USER = "/api/s/{site}/rest/user"
STAT_STA = "/api/s/{site}/stat/sta"
STAT_USER = "/api/s/{site}/stat/user"
STAT_ALLUSER = "/api/s/{site}/stat/alluser"
STAT_GUEST = "/api/s/{site}/stat/guest"
STAT_SESSION = "/api/s/{site}/stat/session"
STAT_AUTHORIZATION = "/api/s/{site}/stat/authorization"
LIST_USER = "/api/s/{site}/list/user"

# User groups
LIST_USERGROUP = "/api/s/{site}/list/usergroup"
REST_USERGROUP = "/api/s/{site}/rest/usergroup"

# Statistics
STAT_REPORT = "/api/s/{site}/stat/report"
STAT_IPS_EVENT = "/api/s/{site}/stat/ips/event"
STAT_HEALTH = "/api/s/{site}/stat/health"
STAT_DASHBOARD = "/api/s/{site}/stat/dashboard"
STAT_DPI = "/api/s/{site}/stat/dpi"
STAT_SITEDPI = "/api/s/{site}/stat/sitedpi"
STAT_PORTFORWARD = "/api/s/{site}/stat/portforward"
STAT_CURRENT_CHANNEL = "/api/s/{site}/stat/current-channel"
STAT_CCODE = "/api/s/{site}/stat/ccode"
STAT_SYSINFO = "/api/s/{site}/stat/sysinfo"
STAT_EVENT = "/api/s/{site}/stat/event"
STAT_ALARM = "/api/s/{site}/stat/alarm"
CNT_ALARM = "/api/s/{site}/cnt/alarm"
STAT_ROGUEAP = "/api/s/{site}/stat/rogueap"
REST_ROGUEKNOWN = "/api/s/{site}/rest/rogueknown"
STAT_VOUCHER = "/api/s/{site}/stat/voucher"
STAT_PAYMENT = "/api/s/{site}/stat/payment"
STAT_SPECTRUM_SCAN = "/api/s/{site}/stat/spectrum-scan"
SELF = "/api/s/{site}/self"
CMD_STAT = "/api/s/{site}/cmd/stat"
CMD_EVTMGR = "/api/s/{site}/cmd/evtmgr"

# Devices
STAT_DEVICE = "/api/s/{site}/stat/device"
CMD_DEVMGR = "/api/s/{site}/cmd/devmgr"
CMD_DEVMGR_UPGRADE = "/api/s/{site}/cmd/devmgr/upgrade"
CMD_DEVMGR_UPGRADE_EXTERNAL = "/api/s/{site}/cmd/devmgr/upgrade-external"
CMD_SYSTEM = "/api/s/{site}/cmd/system"
CMD_FIRMWARE = "/api/s/{site}/cmd/firmware"
REST_DEVICE = "/api/s/{site}/rest/device"
UPD_DEVICE = "/api/s/{site}/upd/device"

# Sites and settings
CMD_SITEMGR = "/api/s/{site}/cmd/sitemgr"
GET_SETTING = "/api/s/{site}/get/setting"
SET_SETTING = "/api/s/{site}/set/setting"
REST_SETTING = "/api/s/{site}/rest/setting"
CMD_BACKUP = "/api/s/{site}/cmd/backup"

# Network configuration
REST_FIREWALLGROUP = "/api/s/{site}/rest/firewallgroup"
REST_FIREWALLRULE = "/api/s/{site}/rest/firewallrule"
REST_ROUTING = "/api/s/{site}/rest/routing"
LIST_PORTFORWARD = "/api/s/{site}/list/portforward"
LIST_DYNAMICDNS = "/api/s/{site}/list/dynamicdns"
LIST_PORTCONF = "/api/s/{site}/list/portconf"
LIST_EXTENSION = "/api/s/{site}/list/extension"
REST_TAG = "/api/s/{site}/rest/tag"
REST_NETWORKCONF = "/api/s/{site}/rest/networkconf"
REST_WLANCONF = "/api/s/{site}/rest/wlanconf"
ADD_WLANCONF = "/api/s/{site}/add/wlanconf"
LIST_WLANGROUP = "/api/s/{site}/list/wlangroup"
REST_RADIUSPROFILE = "/api/s/{site}/rest/radiusprofile"
REST_ACCOUNT = "/api/s/{site}/rest/account"

# Hotspot
CMD_HOTSPOT = "/api/s/{site}/cmd/hotspot"
REST_HOTSPOTOP = "/api/s/{site}/rest/hotspotop"

# Event stream (websocket), relative to the controller host
EVENTS_WS = "/wss/s/{site}/events"
