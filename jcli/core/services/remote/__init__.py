"""Remote access — Tailscale in userspace mode plus keep-awake."""
