"""Individual status bar blocks: weather, VPN, xrandr, ALSA, timers, task counts and more."""