"""doiuse language service: browser-compatibility diagnostics for stylesheets."""
