from canvasreport.printing import tables

from canvasreport.printing.tables import (ColumnWidths, FIXED_COLUMNS_WIDTH,
                                          MIN_TERMINAL_WIDTH,
                                          assignment_table,
                                          calculate_column_widths,
                                          format_assignment_name, format_due,
                                          format_impact, format_points,
                                          grades_table, header_box,
                                          period_heading, render_report,
                                          render_reports, terminal_width,
                                          truncate_string,)

__all__ = ['ColumnWidths', 'FIXED_COLUMNS_WIDTH', 'MIN_TERMINAL_WIDTH',
           'assignment_table', 'calculate_column_widths',
           'format_assignment_name', 'format_due', 'format_impact',
           'format_points', 'grades_table', 'header_box', 'period_heading',
           'render_report', 'render_reports', 'tables', 'terminal_width',
           'truncate_string']
