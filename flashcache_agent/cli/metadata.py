"""
Static meta-data and usage text for the flashcache resource agent.
"""
from ..models import DEFAULT_RESOURCE_NAME

ACTIONS = "start|stop|status|monitor|reload|validate-all|meta-data|usage|help"

METADATA = f"""<?xml version="1.0"?>
<!DOCTYPE resource-agent SYSTEM "ra-api-1.dtd">
<resource-agent name="flashcache" version="1.0">
<version>1.0</version>

<longdesc lang="en">
Manages a flashcache block device: a fast cache device layered in front of
a slower backing device and exposed through the device-mapper. Stopping the
resource removes the mapping, which flushes the cache to the backing device.
</longdesc>
<shortdesc lang="en">Manages a flashcache cached block device</shortdesc>

<parameters>
<parameter name="name" unique="1" required="0">
<longdesc lang="en">
Name of the device-mapper mapping; the cached device appears as
/dev/mapper/&lt;name&gt;.
</longdesc>
<shortdesc lang="en">Mapping name</shortdesc>
<content type="string" default="{DEFAULT_RESOURCE_NAME}"/>
</parameter>

<parameter name="device" unique="1" required="1">
<longdesc lang="en">
The backing block device whose data is being cached.
</longdesc>
<shortdesc lang="en">Backing device</shortdesc>
<content type="string"/>
</parameter>

<parameter name="cache_device" unique="1" required="1">
<longdesc lang="en">
The fast block device holding the cache.
</longdesc>
<shortdesc lang="en">Cache device</shortdesc>
<content type="string"/>
</parameter>
</parameters>

<actions>
<action name="start" timeout="60s"/>
<action name="stop" timeout="60s"/>
<action name="monitor" timeout="20s" interval="10s" depth="0"/>
<action name="reload" timeout="60s"/>
<action name="meta-data" timeout="5s"/>
<action name="validate-all" timeout="20s"/>
</actions>
</resource-agent>
"""


def usage(prog: str = "flashcache-agent") -> str:
    return f"usage: {prog} {{{ACTIONS}}}"
