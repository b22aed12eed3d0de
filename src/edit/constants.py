"""
Shared constants for keyboard and pointer editing.

Key names follow the browser KeyboardEvent.key values that NiceGUI forwards.
"""

KEY_ENTER = 'Enter'
KEY_TAB = 'Tab'
KEY_ARROW_UP = 'ArrowUp'
KEY_ARROW_DOWN = 'ArrowDown'
KEY_F2 = 'F2'
KEY_ESCAPE = 'Escape'

# Keys that leave edit mode while the label input has focus
EDITOR_EXIT_KEYS = frozenset({KEY_ENTER, KEY_ESCAPE})

# Shown in place of the label while a node is being edited
EDITING_MARKER = '✎'

# Toolbar buttons stay out of the Tab order: Tab is a command key, and a
# focused button would swallow the next Enter as a native click.
TOOLBAR_BUTTON_PROPS = 'flat dense tabindex=-1'

# ui.keyboard never cancels the browser default, so Tab would still move focus.
TAB_GUARD_SCRIPT = '''
<script>
document.addEventListener('keydown', (e) => {
  const tag = document.activeElement ? document.activeElement.tagName : '';
  if (e.key === 'Tab' && !['INPUT', 'TEXTAREA', 'SELECT'].includes(tag)) {
    e.preventDefault();
  }
});
</script>
'''
