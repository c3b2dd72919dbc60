from reahl.terminalmcp.applescript.errors import UnknownOperationError


class ArgumentDefinition:
    """One argument of a tool, as it appears on the wire.

    The role says where the bound value goes in the operation: a
    ``target`` path segment, the ``value`` being set, the ``direct``
    parameter, a named ``clause`` or one ``property`` of a new object.
    """

    def __init__(
        self,
        wire_name,
        description,
        role,
        echo_name,
        hint=None,
        json_type='string',
        required=True,
        keyword=None,
        choices=None,
    ):
        self.wire_name = wire_name
        self.description = description
        self.role = role
        self.echo_name = echo_name
        self.hint = hint
        self.json_type = json_type
        self.required = required
        self.keyword = keyword
        self.choices = choices


class ToolDefinition:
    def __init__(
        self,
        name,
        description,
        verb,
        arguments=None,
        property_name=None,
        class_name=None,
    ):
        self.name = name
        self.description = description
        self.verb = verb
        self.arguments = list(arguments or [])
        self.property_name = property_name
        self.class_name = class_name

    @property
    def argument_names(self):
        return [argument.wire_name for argument in self.arguments]

    @property
    def required_argument_names(self):
        return [
            argument.wire_name for argument in self.arguments if argument.required
        ]

    def arguments_with_role(self, role):
        return [argument for argument in self.arguments if argument.role == role]


value_types = {
    'integer': ('number', 'integer', 'integer'),
    'boolean': ('boolean', 'boolean', 'boolean'),
    'text': ('string', 'text', 'text'),
    'rectangle': ('string', 'rectangle', 'rectangle'),
    'point': ('string', 'point', 'point'),
    'color': ('string', 'color', 'color'),
    'settings set': ('string', 'settings_set', 'settings set'),
    'missing value': ('string', 'missing_value', 'missing value'),
}

application_properties = [
    ('name', None, 'The name of the application.'),
    ('frontmost', None, 'Is this the active application?'),
    ('version', None, 'The version number of the application.'),
    ('default settings', 'settings set', 'The settings set used for new windows.'),
    (
        'startup settings',
        'settings set',
        'The settings set used for the window created on application startup.',
    ),
]
document_properties = [
    ('name', None, 'Its name.'),
    ('modified', None, 'Has it been modified since the last save?'),
    ('file', None, 'Its location on disk, if it has one.'),
]
window_properties = [
    ('name', None, 'The title of the window.'),
    ('id', None, 'The unique identifier of the window.'),
    ('index', 'integer', 'The index of the window, ordered front to back.'),
    ('bounds', 'rectangle', 'The bounding rectangle of the window.'),
    ('closeable', None, 'Does the window have a close button?'),
    ('miniaturizable', None, 'Does the window have a minimize button?'),
    ('miniaturized', 'boolean', 'Is the window minimized right now?'),
    ('resizable', None, 'Can the window be resized?'),
    ('visible', 'boolean', 'Is the window visible right now?'),
    ('zoomable', None, 'Does the window have a zoom button?'),
    ('zoomed', 'boolean', 'Is the window zoomed right now?'),
    ('document', None, 'The document whose contents are displayed in the window.'),
    (
        'frontmost',
        'boolean',
        'Whether the window is currently the frontmost Terminal window.',
    ),
    (
        'position',
        'point',
        'The position of the window, relative to the upper left corner of the screen.',
    ),
    (
        'origin',
        'point',
        'The position of the window, relative to the lower left corner of the screen.',
    ),
    ('size', 'point', 'The width and height of the window.'),
    (
        'frame',
        'rectangle',
        'The bounding rectangle, relative to the lower left corner of the screen.',
    ),
]
appearance_properties = [
    ('number of rows', 'integer', 'The number of rows displayed in the tab.'),
    ('number of columns', 'integer', 'The number of columns displayed in the tab.'),
    ('cursor color', 'color', 'The cursor color for the tab.'),
    ('background color', 'color', 'The background color for the tab.'),
    ('normal text color', 'color', 'The normal text color for the tab.'),
    ('bold text color', 'color', 'The bold text color for the tab.'),
    (
        'font name',
        'text',
        'The name of the font used to display the tab’s contents.',
    ),
    (
        'font size',
        'integer',
        'The size of the font used to display the tab’s contents.',
    ),
    (
        'font antialiasing',
        'boolean',
        'Whether the font used to display the tab’s contents is antialiased.',
    ),
    (
        'clean commands',
        'text',
        'The processes which will be ignored when checking whether a tab can be '
        'closed without showing a prompt.',
    ),
    ('title displays device name', 'boolean', 'Whether the title contains the device name.'),
    ('title displays shell path', 'boolean', 'Whether the title contains the shell path.'),
    (
        'title displays window size',
        'boolean',
        'Whether the title contains the tab’s size, in rows and columns.',
    ),
    (
        'title displays custom title',
        'boolean',
        'Whether the title contains a custom title.',
    ),
    ('custom title', 'text', 'The tab’s custom title.'),
]
settings_set_properties = [
    ('id', None, 'The unique identifier of the settings set.'),
    ('name', 'text', 'The name of the settings set.'),
    (
        'title displays settings name',
        'boolean',
        'Whether the title contains the settings name.',
    ),
] + appearance_properties
tab_properties = [
    ('contents', None, 'The currently visible contents of the tab.'),
    ('history', None, 'The contents of the entire scrolling buffer of the tab.'),
    ('busy', None, 'Whether the tab is busy running a process.'),
    ('processes', None, 'The processes currently running in the tab.'),
    ('tty', None, 'The tab’s TTY device.'),
    ('selected', 'boolean', 'Whether the tab is selected.'),
    (
        'current settings',
        'settings set',
        'The set of settings which control the tab’s behavior and appearance.',
    ),
    ('title displays file name', 'boolean', 'Whether the title contains the file name.'),
] + appearance_properties

# Properties which accept the missing value placeholder when making a new object.
make_property_type_overrides = {
    'clean commands': 'missing value',
}


def snake_case(words):
    return words.replace(' ', '_')


def target_argument(class_name, description='The %s object'):
    return ArgumentDefinition(
        'target_%s_required_string' % snake_case(class_name),
        description % class_name,
        'target',
        snake_case(class_name),
        hint=class_name,
        keyword=class_name,
    )


def target_arguments_for(object_name):
    if object_name == 'tab of window':
        return [
            target_argument('tab'),
            target_argument('window', description='The %s containing the tab'),
        ]
    return [target_argument(object_name)]


def direct_argument(wire_name, description, hint, json_type='string', required=True):
    return ArgumentDefinition(
        wire_name,
        description,
        'direct',
        'direct_parameter',
        hint=hint,
        json_type=json_type,
        required=required,
    )


def clause_argument(
    wire_name,
    description,
    keyword,
    hint,
    json_type='string',
    required=False,
    choices=None,
):
    return ArgumentDefinition(
        wire_name,
        description,
        'clause',
        snake_case(keyword),
        hint=hint,
        json_type=json_type,
        required=required,
        keyword=keyword,
        choices=choices,
    )


def property_tools(object_name, properties):
    object_label = object_name.replace(' of window', '')
    tool_definitions = []
    for property_name, value_type, description in properties:
        tool_suffix = '%s_of_%s' % (snake_case(property_name), snake_case(object_name))
        tool_definitions.append(
            ToolDefinition(
                'get_%s' % tool_suffix,
                'Get the %s of the %s. %s' % (property_name, object_label, description),
                'get',
                arguments=target_arguments_for(object_name),
                property_name=property_name,
            )
        )
        if value_type is None:
            continue
        json_type, wire_suffix, hint = value_types[value_type]
        value_argument = ArgumentDefinition(
            'value_required_%s' % wire_suffix,
            'New value for: %s' % description,
            'value',
            'value',
            hint=hint,
            json_type=json_type,
            keyword='to',
        )
        tool_definitions.append(
            ToolDefinition(
                'set_%s' % tool_suffix,
                'Set the %s of the %s. %s' % (property_name, object_label, description),
                'set',
                arguments=target_arguments_for(object_name) + [value_argument],
                property_name=property_name,
            )
        )
    return tool_definitions


def make_property_arguments(properties):
    property_arguments = []
    for property_name, value_type, description in properties:
        if value_type is None:
            continue
        value_type = make_property_type_overrides.get(property_name, value_type)
        json_type, wire_suffix, hint = value_types[value_type]
        property_arguments.append(
            ArgumentDefinition(
                'with_properties_optional_%s_%s' % (wire_suffix, snake_case(property_name)),
                'Optional %s property: %s' % (property_name, description),
                'property',
                snake_case(property_name),
                hint=hint,
                json_type=json_type,
                required=False,
                keyword=property_name,
            )
        )
    return property_arguments


def at_argument():
    return clause_argument(
        'at_optional_location_specifier',
        'The location at which to insert the object.',
        'at',
        'location specifier',
    )


def with_data_argument():
    return clause_argument(
        'with_data_optional_any',
        'The initial contents of the object.',
        'with data',
        'any',
    )


def saving_argument(description):
    return clause_argument(
        'saving_optional_save_options',
        '%s One of: yes, no, ask.' % description,
        'saving',
        'save options',
        choices=['yes', 'no', 'ask'],
    )


def print_arguments():
    return [
        clause_argument(
            'with_properties_optional_print_settings',
            'The print settings to use.',
            'with properties',
            'print settings',
        ),
        clause_argument(
            'print_dialog_optional_boolean',
            'Should the application show the print dialog?',
            'print dialog',
            'boolean',
            json_type='boolean',
        ),
    ]


def close_tool(object_name):
    return ToolDefinition(
        'close_for_%s' % object_name,
        'Close a %s.' % object_name,
        'close',
        arguments=target_arguments_for(object_name)
        + [
            saving_argument('Whether or not changes should be saved before closing.'),
            clause_argument(
                'saving_in_optional_file',
                'The file in which to save the document.',
                'saving in',
                'file',
            ),
        ],
    )


def save_tool(object_name):
    return ToolDefinition(
        'save_for_%s' % object_name,
        'Save a %s.' % object_name,
        'save',
        arguments=target_arguments_for(object_name)
        + [
            clause_argument(
                'inParam_optional_file',
                'The file in which to save the document.',
                'in',
                'file',
            ),
        ],
    )


def print_tool(object_name):
    return ToolDefinition(
        'print_for_%s' % object_name,
        'Print a %s.' % object_name,
        'print',
        arguments=target_arguments_for(object_name) + print_arguments(),
    )


def count_tool(tool_name, class_name, object_name=None):
    return ToolDefinition(
        tool_name,
        'Return the number of %s elements%s.'
        % (class_name, ' within a %s' % object_name if object_name else ''),
        'count',
        arguments=target_arguments_for(object_name) if object_name else [],
        class_name=class_name,
    )


def make_tool(tool_name, class_name, properties):
    return ToolDefinition(
        tool_name,
        'Make a new %s.' % class_name,
        'make',
        arguments=[at_argument(), with_data_argument()]
        + make_property_arguments(properties),
        class_name=class_name,
    )


def command_tools():
    return [
        ToolDefinition(
            'open',
            'Open a document.',
            'open',
            arguments=[
                direct_argument(
                    'direct_parameter_required_list_of_file',
                    'The file(s) to be opened.',
                    'list of file',
                ),
            ],
        ),
        close_tool('document'),
        close_tool('window'),
        save_tool('document'),
        save_tool('window'),
        ToolDefinition(
            'print_file',
            'Print a document given as a file.',
            'print',
            arguments=[
                direct_argument(
                    'direct_parameter_required_list_of_file',
                    'The file(s), document(s), or window(s) to be printed.',
                    'list of file',
                ),
            ]
            + print_arguments(),
        ),
        print_tool('document'),
        print_tool('window'),
        ToolDefinition(
            'quit',
            'Quit the application.',
            'quit',
            arguments=[
                saving_argument(
                    'Whether or not changed documents should be saved before closing.'
                ),
            ],
        ),
        count_tool('count_document', 'document'),
        count_tool('count_tab_of_window', 'tab', object_name='window'),
        count_tool('count_settings_set', 'settings set'),
        count_tool('count_window', 'window'),
        ToolDefinition(
            'delete',
            'Delete an object.',
            'delete',
            arguments=[
                direct_argument(
                    'direct_parameter_required_specifier',
                    'The object to delete.',
                    'specifier',
                ),
            ],
        ),
        ToolDefinition(
            'duplicate',
            'Copy object(s) and put the copies at a new location.',
            'duplicate',
            arguments=[
                direct_argument(
                    'direct_parameter_required_specifier',
                    'The object(s) to duplicate.',
                    'specifier',
                ),
                clause_argument(
                    'to_required_location_specifier',
                    'The location for the new object(s).',
                    'to',
                    'location specifier',
                    required=True,
                ),
                clause_argument(
                    'with_properties_optional_record',
                    'Properties to be set in the new duplicated object(s).',
                    'with properties',
                    'record',
                ),
            ],
        ),
        ToolDefinition(
            'exists',
            'Verify if an object exists.',
            'exists',
            arguments=[
                direct_argument(
                    'direct_parameter_required_specifier',
                    'The object in question.',
                    'specifier',
                ),
            ],
        ),
        make_tool('make_document', 'document', []),
        ToolDefinition(
            'make_tab_of_window',
            'Make a new tab in a window.',
            'make',
            arguments=[
                ArgumentDefinition(
                    'at_required_location_specifier_window',
                    'The window location where the tab should be created',
                    'target',
                    'window',
                    hint='window',
                    keyword='window',
                ),
                with_data_argument(),
            ]
            + make_property_arguments(tab_properties),
            class_name='tab',
        ),
        make_tool('make_settings_set', 'settings set', settings_set_properties),
        make_tool('make_window', 'window', window_properties),
        ToolDefinition(
            'move',
            'Move object(s) to a new location.',
            'move',
            arguments=[
                direct_argument(
                    'direct_parameter_required_specifier',
                    'The object(s) to move.',
                    'specifier',
                ),
                clause_argument(
                    'to_required_location_specifier',
                    'The new location for the object(s).',
                    'to',
                    'location specifier',
                    required=True,
                ),
            ],
        ),
        ToolDefinition(
            'do_script',
            'Runs a UNIX shell script or command.',
            'do script',
            arguments=[
                direct_argument(
                    'direct_parameter_optional_text',
                    'The command to execute.',
                    'text',
                    required=False,
                ),
                clause_argument(
                    'with_command_optional_text',
                    'Data to be passed to the Terminal application as the command '
                    'line. Deprecated; use direct parameter instead.',
                    'with command',
                    'text',
                ),
                clause_argument(
                    'inParam_optional_tab',
                    'The tab in which to execute the command',
                    'in',
                    'tab',
                ),
            ],
        ),
        ToolDefinition(
            'get_url',
            'Open a command, ssh, telnet or x-man-page URL.',
            'open url',
            arguments=[
                direct_argument(
                    'direct_parameter_required_text',
                    'The URL to open.',
                    'text',
                ),
            ],
        ),
    ]


def build_catalog():
    tool_definitions = (
        property_tools('application', application_properties)
        + property_tools('document', document_properties)
        + property_tools('window', window_properties)
        + property_tools('settings set', settings_set_properties)
        + property_tools('tab of window', tab_properties)
        + command_tools()
    )
    return {
        tool_definition.name: tool_definition for tool_definition in tool_definitions
    }


tool_catalog = build_catalog()


def tool_definition_named(tool_name, catalog=None):
    catalog = tool_catalog if catalog is None else catalog
    try:
        return catalog[tool_name]
    except KeyError as error:
        raise UnknownOperationError('Unknown tool: %s' % tool_name) from error
