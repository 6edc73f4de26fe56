"""
Catalog — every tool, script, cleanable and check ``j`` knows about.

Public API::

    from jcli.core.services.catalog import tool_by_name, all_scripts
"""

from jcli.core.services.catalog.cleanables import (  # noqa: F401
    all_cleanables,
    available_cleanables,
    cleanable_by_name,
)
from jcli.core.services.catalog.identity import all_identity_checks  # noqa: F401
from jcli.core.services.catalog.package_managers import (  # noqa: F401
    all_package_managers,
    package_manager_by_flag,
)
from jcli.core.services.catalog.resources import (  # noqa: F401
    all_cache_checks,
    all_disk_checks,
    all_network_checks,
)
from jcli.core.services.catalog.run_commands import (  # noqa: F401
    all_run_commands,
    run_command_by_name,
)
from jcli.core.services.catalog.scripts import (  # noqa: F401
    all_scripts,
    checkable_scripts,
    script_by_name,
)
from jcli.core.services.catalog.security import all_security_checks  # noqa: F401
from jcli.core.services.catalog.skills import (  # noqa: F401
    favorite_skills,
    is_favorite_skill,
    recommended_repos,
    skill_repo_by_name,
)
from jcli.core.services.catalog.tools import (  # noqa: F401
    all_tools,
    installable_tools,
    tool_by_name,
    tools_by_category,
)
